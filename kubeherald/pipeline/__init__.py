"""Event-processing pipeline.

Submodules:
    normalizer  -- raw v1.Event mapping -> CanonicalEvent.
    enrichment  -- node name and labels via injected lookups.
    filters     -- ordered exclusion rules and the severity gate.
    guard       -- global creation-time watermark.
    transform   -- CanonicalEvent -> AlertPayload / TrailEntry.
    processor   -- EventPipeline, which runs the stages per event.
"""

from kubeherald.pipeline.enrichment import NodeLabelResolver, PodHostResolver, enrich
from kubeherald.pipeline.filters import should_alert, should_suppress, suppression_reason
from kubeherald.pipeline.guard import PipelineState, admit
from kubeherald.pipeline.normalizer import MalformedEventError, normalize
from kubeherald.pipeline.processor import EventPipeline, Outcome, build_pipeline
from kubeherald.pipeline.transform import to_alert, to_trail_entry

__all__ = [
    "EventPipeline",
    "MalformedEventError",
    "NodeLabelResolver",
    "Outcome",
    "PipelineState",
    "PodHostResolver",
    "admit",
    "build_pipeline",
    "enrich",
    "normalize",
    "should_alert",
    "should_suppress",
    "suppression_reason",
    "to_alert",
    "to_trail_entry",
]
