"""
TFTSight - Match tracker analytics for Teamfight Tactics

Turns a compressed round-by-round tracker snapshot of one match into a
normalized timeline, key decision points, carry rankings and economy totals.

Usage:
    from tftsight import analyze_tracker

    result = analyze_tracker(raw_bytes, mode="summary")

    for carry in result["topCarries"]:
        print(f"{carry['champion']}: {carry['totalDamage']}")
"""

__version__ = "0.1.0"
__author__ = "TFTSight Contributors"


def __getattr__(name):
    """Lazy import for heavy dependencies."""
    if name == "TrackerOrchestrator":
        from tftsight.pipeline.orchestrator import TrackerOrchestrator
        return TrackerOrchestrator
    elif name == "TrackerRequest":
        from tftsight.pipeline.orchestrator import TrackerRequest
        return TrackerRequest
    elif name == "analyze_tracker":
        from tftsight.pipeline.orchestrator import analyze_tracker
        return analyze_tracker
    elif name == "decode_envelope":
        from tftsight.tracker.envelope import decode_envelope
        return decode_envelope
    elif name == "normalize_stages":
        from tftsight.tracker.normalizer import normalize_stages
        return normalize_stages
    elif name == "NameResolver":
        from tftsight.integrations.names import NameResolver
        return NameResolver
    raise AttributeError(f"module 'tftsight' has no attribute '{name}'")


__all__ = [
    # Version
    "__version__",
    # Pipeline
    "TrackerOrchestrator",
    "TrackerRequest",
    "analyze_tracker",
    "decode_envelope",
    "normalize_stages",
    "NameResolver",
]
