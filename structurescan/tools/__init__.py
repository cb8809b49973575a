# structurescan/tools/__init__.py
"""
StructureScan tools package

Holds the pluggable collaborators the engine talks to:
  - classifier (subpackage): adapter protocol, pooled lifecycle, ONNX and mock adapters

Engine logic (detection, risk, aggregation, recommendations) lives in
`structurescan.core` and should be imported from there.
"""
