"""
Event Graph Toolkit

This package turns a content pack of declarative event and outcome records
into a typed dependency graph and a 2-D layout of that graph. Each layer
communicates only through the immutable contracts in ``eventgraph.contracts``.

LAYER STRUCTURE:
================

1. INGESTION LAYER (ingestion/)
   - Responsibility: Discover record files, parse them, write years back
   - Allowed inputs: Files under the configured content root
   - Outputs: EventRecord, OutcomeRecord, LoadReport
   - MUST NOT: Derive edges or positions

2. CORE GRAPH ENGINE (core/)
   - Responsibility: Outcome index, dependency edges, filters, topology
   - Allowed inputs: Parsed records
   - Outputs: DependencyEdge tuples, OutcomeView, TopologyMetrics
   - MUST NOT: Touch the file system, hold state between calls

3. LAYOUT LAYER (layout/)
   - Responsibility: Node positions for the external renderer
   - Allowed inputs: Filtered records and edges
   - Outputs: Position mappings, NodePlacement tuples
   - MUST NOT: Emit presentation values (colors, fonts)

4. STATE LAYER (state/)
   - Responsibility: Reload pipeline, snapshot publication
   - Allowed inputs: Loader and builder results
   - Outputs: GraphSnapshot (immutable, replaced atomically)
   - MUST NOT: Mutate a published snapshot

5. OBSERVABILITY (observability/)
   - Responsibility: Logging configuration for entry points

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: records, edges and snapshots are frozen
- Deterministic: identical inputs in identical order give identical edges
- Explicit errors: per-file failures are recorded in the LoadReport
- No self-edges: an event never depends on itself
"""

__version__ = "0.4.0"
