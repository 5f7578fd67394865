"""
TFTSight Pipeline - tracker analysis orchestration.

This module handles the complete snapshot processing pipeline:
- Envelope decoding
- Stage normalization
- Result assembly and output contract validation
"""

from tftsight.pipeline.orchestrator import (
    TrackerOrchestrator,
    TrackerRequest,
    analyze_tracker,
    render_json,
)

__all__ = ["TrackerOrchestrator", "TrackerRequest", "analyze_tracker", "render_json"]
