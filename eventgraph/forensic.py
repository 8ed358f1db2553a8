"""
Content Inspector CLI
=====================

Loads a content root and reports what the dependency graph looks like,
without any UI.

COMMANDS:
- summary:   Record/edge counts, skipped files, structural metrics
- event:     One event with its incoming and outgoing edges
- outcome:   Producers, consumers and blocked events of one outcome
- cycles:    Dependency cycles between events
- layout:    Node positions (force or lanes) as JSON
- set-years: Rewrite the year bounds of one event file

USAGE:
    python -m eventgraph.forensic --content-root ./content [COMMAND] [ARGS]
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .contracts.records import EventCategory, EventRecord, EventTier
from .core.filter import GraphFilter
from .core.graph_builder import GraphBuilder
from .ingestion.config import StorageConfig
from .ingestion.writer import EventWriter
from .layout.force import ForceDirectedLayout
from .layout.lanes import LaneLayout
from .observability import configure_logging
from .state.pipeline import ReloadPipeline
from .state.snapshot import GraphSnapshot


def load_snapshot(args) -> GraphSnapshot:
    config = StorageConfig.load(
        config_path=Path(args.config) if args.config else None,
        content_root=Path(args.content_root) if args.content_root else None
    )
    with ReloadPipeline(config) as pipeline:
        return pipeline.reload_sync()


def describe_event(event: EventRecord) -> Dict:
    return {
        "id": event.id,
        "title": event.title,
        "category": event.category.value,
        "tier": event.tier.value,
        "year_range": list(event.year_range) if event.year_range else None,
        "display_year": event.display_year,
        "historicity_score": event.historicity_score,
        "location": event.location,
        "required_outcomes": list(event.required_outcomes),
        "required_outcomes_any": [list(group) for group in event.required_outcomes_any],
        "forbidden_outcomes": list(event.forbidden_outcomes),
        "produced_outcomes": {label: list(ids) for label, ids in event.produced_outcomes},
        "source_path": event.source_path,
    }


def describe_edges(edges) -> List[Dict]:
    return [
        {
            "from": edge.from_event_id,
            "to": edge.to_event_id,
            "outcome": edge.outcome_id,
            "kind": edge.kind.value,
        }
        for edge in edges
    ]


def build_filter(args) -> GraphFilter:
    categories = frozenset(EventCategory)
    if args.category:
        categories = frozenset(EventCategory(c) for c in args.category)
    tiers = frozenset(EventTier)
    if args.tier:
        tiers = frozenset(EventTier(t) for t in args.tier)
    return GraphFilter(
        year_range=(args.year_start, args.year_end),
        categories=categories,
        tiers=tiers,
        required_outcomes=frozenset(args.preset or ()),
        search_query=args.search or ""
    )


def emit(payload) -> None:
    print(json.dumps(payload, indent=2, sort_keys=False))


def cmd_summary(args):
    snapshot = load_snapshot(args)
    metrics = snapshot.topology().compute_metrics()

    print(f"[*] Content root: {snapshot.report.root}")
    print(f"    Events:   {snapshot.event_count}")
    print(f"    Outcomes: {snapshot.outcome_count}")
    print(f"    Edges:    {snapshot.edge_count}")
    print(f"    Fingerprint: {snapshot.fingerprint[:16]}")
    print(f"[*] Structure: {metrics.component_count} components, "
          f"{metrics.isolated_count} isolated, acyclic={metrics.is_acyclic}")

    if snapshot.report.issues:
        print(f"[!] {snapshot.report.skipped} skipped:")
        for issue in snapshot.report.issues:
            print(f"    {issue.code.name:<24} {issue.path}: {issue.error.message}")


def cmd_event(args):
    snapshot = load_snapshot(args)
    event = snapshot.events.get(args.event_id)
    if event is None:
        print(f"[!] Event not found: {args.event_id}")
        return 1

    payload = describe_event(event)
    payload["incoming"] = describe_edges(snapshot.incoming(event.id))
    payload["outgoing"] = describe_edges(snapshot.outgoing(event.id))
    emit(payload)
    return 0


def cmd_outcome(args):
    snapshot = load_snapshot(args)
    view = GraphBuilder().outcome_view(args.outcome_id, snapshot.event_list)
    outcome = snapshot.outcomes.get(args.outcome_id)

    emit({
        "id": args.outcome_id,
        "name": outcome.name if outcome else None,
        "category": outcome.category if outcome else None,
        "dangling": view.is_dangling,
        "producers": [e.id for e in view.producers],
        "consumers": [e.id for e in view.consumers],
        "blocked": [e.id for e in view.blocked],
        "produces_edges": describe_edges(view.produces_edges()),
    })
    return 0


def cmd_cycles(args):
    snapshot = load_snapshot(args)
    cycles = snapshot.topology().find_cycles()
    if not cycles:
        print("[*] No dependency cycles.")
        return 0
    print(f"[!] {len(cycles)} dependency cycle(s):")
    for cycle in cycles:
        print("    " + " -> ".join(cycle + cycle[:1]))
    return 0


def cmd_layout(args):
    try:
        graph_filter = build_filter(args)
    except ValueError as e:
        print(f"[!] Invalid filter: {e}")
        return 1

    snapshot = load_snapshot(args)
    nodes = snapshot.filtered_events(graph_filter)

    if args.mode == "force":
        layout = ForceDirectedLayout(width=args.width, height=args.height)
        positions = layout.layout(nodes, snapshot.edges, iterations=args.iterations, seed=args.seed)
    else:
        positions = LaneLayout().positions(nodes, graph_filter.min_year)

    emit({event_id: [round(x, 3), round(y, 3)] for event_id, (x, y) in positions.items()})
    return 0


def cmd_set_years(args):
    snapshot = load_snapshot(args)
    event = snapshot.events.get(args.event_id)
    if event is None or not event.source_path:
        print(f"[!] Event not found: {args.event_id}")
        return 1

    changed = EventWriter().update_event_years(event.source_path, args.min_year, args.max_year)
    print(f"[*] {'Updated' if changed else 'Unchanged'}: {event.source_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Event graph content inspector")
    parser.add_argument("--content-root", help="Directory holding events/ and outcomes/")
    parser.add_argument("--config", help="JSON config file with a content_root key")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("summary", help="Counts and skipped files")

    event_parser = subparsers.add_parser("event", help="Show one event")
    event_parser.add_argument("event_id")

    outcome_parser = subparsers.add_parser("outcome", help="Show one outcome")
    outcome_parser.add_argument("outcome_id")

    subparsers.add_parser("cycles", help="List dependency cycles")

    layout_parser = subparsers.add_parser("layout", help="Compute node positions")
    layout_parser.add_argument("--mode", choices=("force", "lanes"), default="lanes")
    layout_parser.add_argument("--width", type=float, default=1200.0)
    layout_parser.add_argument("--height", type=float, default=800.0)
    layout_parser.add_argument("--iterations", type=int, default=100)
    layout_parser.add_argument("--seed", type=int, default=None)
    layout_parser.add_argument("--year-start", type=int, default=1025)
    layout_parser.add_argument("--year-end", type=int, default=1100)
    layout_parser.add_argument("--category", action="append",
                               choices=[c.value for c in EventCategory])
    layout_parser.add_argument("--tier", action="append",
                               choices=[t.value for t in EventTier])
    layout_parser.add_argument("--preset", action="append", help="Outcome id preset")
    layout_parser.add_argument("--search", help="Substring of event id or title")

    years_parser = subparsers.add_parser("set-years", help="Rewrite year bounds")
    years_parser.add_argument("event_id")
    years_parser.add_argument("--min-year", type=int)
    years_parser.add_argument("--max-year", type=int)

    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())

    commands = {
        "summary": cmd_summary,
        "event": cmd_event,
        "outcome": cmd_outcome,
        "cycles": cmd_cycles,
        "layout": cmd_layout,
        "set-years": cmd_set_years,
    }
    return commands[args.command](args) or 0


if __name__ == "__main__":
    sys.exit(main())
