"""Event pipeline: drives raw events through every stage.

Per event: normalize -> enrich -> filter -> guard -> alert (severity gate)
-> trail entry. ``run`` overlaps events while they are suspended in
enrichment lookups, then commits them (guard, alert, trail) in the order
they arrived. The watermark in PipelineState is the only state shared
between events.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Mapping
from enum import StrEnum
from typing import Any

from kubeherald.models.alerts import AlertPayload, TrailEntry
from kubeherald.models.config import FilterConfig, KubeHeraldConfig
from kubeherald.models.events import CanonicalEvent
from kubeherald.observability.logging import event_log_context, get_logger
from kubeherald.observability.metrics import events_filtered_total, events_total, sink_errors_total
from kubeherald.pipeline.enrichment import NodeLabelResolver, PodHostResolver, enrich
from kubeherald.pipeline.filters import should_alert, suppression_reason
from kubeherald.pipeline.guard import PipelineState, admit
from kubeherald.pipeline.normalizer import MalformedEventError, normalize
from kubeherald.pipeline.transform import to_alert, to_trail_entry
from kubeherald.sinks import AlertSink, TrailBuffer, TrailSink

_log = get_logger("pipeline")

_DEFAULT_MAX_CONCURRENCY = 16

_EXHAUSTED = object()


class Outcome(StrEnum):
    """What the pipeline did with one event."""

    ALERTED = "alerted"
    RECORDED = "recorded"
    FILTERED = "filtered"
    STALE = "stale"
    MALFORMED = "malformed"


async def _next_event(iterator: AsyncIterator[Mapping[str, Any]]) -> Any:
    try:
        return await anext(iterator)
    except StopAsyncIteration:
        return _EXHAUSTED


class EventPipeline:
    """Classifies, filters, deduplicates and enriches cluster events.

    Args:
        filters:             Exclusion lists and accepted severity labels.
        alert_sink:          Receives payloads for alerted events.
        trail_sink:          Receives a trail entry for every admitted event.
        resolve_pod_host:    ``pod name -> node name | None`` lookup.
        resolve_node_labels: ``node name -> labels`` lookup.
        state:               Watermark shared by every event. A fresh
                             PipelineState is created when omitted.
        cluster_name:        Value of the ``cluster`` tag; omitted when empty.
        max_concurrency:     Events processed at once by ``run``.
    """

    def __init__(
        self,
        filters: FilterConfig,
        alert_sink: AlertSink,
        trail_sink: TrailSink,
        resolve_pod_host: PodHostResolver,
        resolve_node_labels: NodeLabelResolver,
        state: PipelineState | None = None,
        cluster_name: str = "",
        max_concurrency: int = _DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._filters = filters
        self._alert_sink = alert_sink
        self._trail_sink = trail_sink
        self._resolve_pod_host = resolve_pod_host
        self._resolve_node_labels = resolve_node_labels
        self._state = state if state is not None else PipelineState()
        self._cluster_name = cluster_name
        self._max_concurrency = max_concurrency
        self._stop_requested = asyncio.Event()

    @property
    def state(self) -> PipelineState:
        return self._state

    # ------------------------------------------------------------------
    # Single event
    # ------------------------------------------------------------------

    async def process(self, raw_event: Mapping[str, Any]) -> Outcome:
        """Run one raw event through every stage and report the outcome.

        Never raises for bad input, failed lookups or failed sinks.
        """
        prepared = await self._prepare(raw_event)
        if isinstance(prepared, Outcome):
            return prepared
        with event_log_context(prepared):
            return self._commit(prepared)

    async def _prepare(self, raw_event: Mapping[str, Any]) -> CanonicalEvent | Outcome:
        """Normalize, enrich and filter. Returns the terminal outcome for dropped events."""
        try:
            event = normalize(raw_event)
        except MalformedEventError as exc:
            _log.warning("event_malformed", error=str(exc))
            return _count(Outcome.MALFORMED)

        with event_log_context(event):
            event = await enrich(event, self._resolve_pod_host, self._resolve_node_labels)

            rule = suppression_reason(event, self._filters)
            if rule is not None:
                _log.debug("event_filtered", rule=rule, component=event.component)
                events_filtered_total.labels(rule=rule).inc()
                return _count(Outcome.FILTERED)
        return event

    def _commit(self, event: CanonicalEvent) -> Outcome:
        """Guard, alert and trail. Callers run this in stream arrival order."""
        if not admit(event, self._state):
            assert event.creation_timestamp is not None
            _log.debug(
                "event_stale",
                created_at=event.creation_timestamp.isoformat(),
                watermark=str(self._state.last_accepted_creation_time),
            )
            return _count(Outcome.STALE)

        outcome = Outcome.RECORDED
        if should_alert(event, self._filters):
            self._send_alert(to_alert(event, self._cluster_name))
            outcome = Outcome.ALERTED
        else:
            _log.debug("event_below_threshold", severity=event.severity.value)

        self._append_trail_entry(to_trail_entry(event))
        return _count(outcome)

    def _send_alert(self, payload: AlertPayload) -> None:
        try:
            self._alert_sink.send_alert(payload)
        except Exception as exc:  # noqa: BLE001
            _log.error("alert_sink_error", sink=self._alert_sink.sink_name, culprit=payload.culprit, error=str(exc))
            sink_errors_total.labels(sink="alert").inc()
            return
        _log.info(
            "alert_sent",
            level=payload.level.value,
            culprit=payload.culprit,
            fingerprint=payload.fingerprint,
        )

    def _append_trail_entry(self, entry: TrailEntry) -> None:
        try:
            self._trail_sink.append_trail_entry(entry)
        except Exception as exc:  # noqa: BLE001
            _log.error("trail_sink_error", error=str(exc))
            sink_errors_total.labels(sink="trail").inc()

    # ------------------------------------------------------------------
    # Stream
    # ------------------------------------------------------------------

    async def run(self, source: AsyncIterable[Mapping[str, Any]]) -> None:
        """Consume *source* until it is exhausted or ``stop()`` is called.

        Up to ``max_concurrency`` events are in flight at once. Enrichment
        lookups overlap, but the guard, alert and trail stages run in the
        order events arrived, so a slow lookup never makes an earlier event
        look stale. Each event waits for its predecessor's commit turn.

        On stop the pending pull from *source* is abandoned but events
        already taken are allowed to finish. Errors raised by *source*
        propagate once the in-flight events are done; reconnecting is the
        caller's job.
        """
        loop = asyncio.get_running_loop()
        semaphore = asyncio.Semaphore(self._max_concurrency)
        in_flight: set[asyncio.Task[Outcome]] = set()
        iterator = aiter(source)
        stop_wait = asyncio.create_task(self._stop_requested.wait(), name="pipeline-stop")
        pull: asyncio.Task[Any] | None = None
        previous_turn: asyncio.Future[None] | None = None

        _log.info("pipeline_started", max_concurrency=self._max_concurrency)
        try:
            while not self._stop_requested.is_set():
                await semaphore.acquire()
                pull = asyncio.create_task(_next_event(iterator), name="pipeline-pull")
                await asyncio.wait({pull, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
                if not pull.done():
                    semaphore.release()
                    break
                raw_event = pull.result()
                pull = None
                if raw_event is _EXHAUSTED:
                    semaphore.release()
                    break

                turn: asyncio.Future[None] = loop.create_future()
                task = asyncio.create_task(self._process_in_order(raw_event, previous_turn, turn, semaphore))
                previous_turn = turn
                in_flight.add(task)
                task.add_done_callback(in_flight.discard)
        finally:
            abandoned = [t for t in (pull, stop_wait) if t is not None and not t.done()]
            for t in abandoned:
                t.cancel()
            await asyncio.gather(*abandoned, *in_flight, return_exceptions=True)
            _log.info("pipeline_stopped")

    async def _process_in_order(
        self,
        raw_event: Mapping[str, Any],
        previous_turn: asyncio.Future[None] | None,
        turn: asyncio.Future[None],
        semaphore: asyncio.Semaphore,
    ) -> Outcome:
        try:
            prepared = await self._prepare(raw_event)
            if previous_turn is not None:
                await previous_turn
            if isinstance(prepared, Outcome):
                return prepared
            with event_log_context(prepared):
                return self._commit(prepared)
        finally:
            if not turn.done():
                turn.set_result(None)
            semaphore.release()

    def stop(self) -> None:
        """Stop pulling new events; in-flight events still complete.

        The request is sticky: a pipeline stopped before ``run`` starts
        returns from ``run`` without pulling anything.
        """
        self._stop_requested.set()


def _count(outcome: Outcome) -> Outcome:
    events_total.labels(outcome=outcome.value).inc()
    return outcome


def build_pipeline(
    config: KubeHeraldConfig,
    alert_sink: AlertSink,
    resolve_pod_host: PodHostResolver,
    resolve_node_labels: NodeLabelResolver,
    trail_sink: TrailSink | None = None,
    state: PipelineState | None = None,
) -> EventPipeline:
    """Wire an EventPipeline from loaded configuration.

    A TrailBuffer sized by ``config.pipeline.trail_max_entries`` is used
    when no trail sink is given.
    """
    if trail_sink is None:
        trail_sink = TrailBuffer(max_entries=config.pipeline.trail_max_entries)
    _log.info(
        "pipeline_configured",
        event_levels=list(config.filters.accepted_severity_labels),
        include_namespaces=list(config.filters.include_namespaces),
        exclude_namespaces=list(config.filters.exclude_namespaces),
        exclude_components=list(config.filters.exclude_components),
        exclude_reasons=list(config.filters.exclude_reasons),
        cluster=config.cluster_name or None,
    )
    return EventPipeline(
        filters=config.filters,
        alert_sink=alert_sink,
        trail_sink=trail_sink,
        resolve_pod_host=resolve_pod_host,
        resolve_node_labels=resolve_node_labels,
        state=state,
        cluster_name=config.cluster_name,
        max_concurrency=config.pipeline.max_concurrency,
    )
