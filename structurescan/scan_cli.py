# structurescan/scan_cli.py
"""
Damage scan CLI (developer harness).

Usage
-----
    structurescan --photos data/sample/building
    structurescan --photos data/sample/building --classifier onnx --model models/damage.onnx --workers 4

Each sub-folder of --photos is analyzed as one building area. Prints the
summary sentence, then the JSON summary record.
"""

from __future__ import annotations

import argparse
import json
import sys

from structurescan.core.assessment.aggregate import describe_summary
from structurescan.core.assessment.records import summary_record
from structurescan.core.config import EngineConfig
from structurescan.core.errors import EmptyBatchFailure
from structurescan.core.vision.classifier import make_classifier_factory
from structurescan.orchestrators.assessment_orchestrator import AssessmentOrchestrator


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Building damage scan")
    p.add_argument("--photos", type=str, required=True, help="Folder of photos; sub-folders become areas")
    p.add_argument("--classifier", type=str, choices=("mock", "onnx"), default="mock")
    p.add_argument("--model", type=str, default=None, help="Path to the .onnx model (required for --classifier onnx)")
    p.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    p.add_argument("--pretty", type=int, choices=(0, 1), default=1)

    args = p.parse_args(argv)

    if args.classifier == "onnx" and not args.model:
        p.error("--model is required with --classifier onnx")

    config = EngineConfig.from_env()
    if args.workers:
        config = config.model_copy(update={"max_workers": args.workers})

    kwargs = {"model_path": args.model} if args.classifier == "onnx" else {}
    factory = make_classifier_factory(args.classifier, **kwargs)

    try:
        summary = AssessmentOrchestrator(factory, config=config).analyze_folder(args.photos)
    except EmptyBatchFailure as e:
        print(f"scan failed: {e}", file=sys.stderr)
        return 1

    print(describe_summary(summary))
    print(json.dumps(summary_record(summary), indent=2 if args.pretty else None))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
