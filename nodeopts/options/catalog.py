"""Option catalog: single source of truth for all node options.

Each option is defined with its name, validator type, default value,
constraints and an internal flag. Internal options are hidden from the
external listing. On startup, create_default_registry() turns the table
into descriptors; boot configuration may then replace individual defaults.
"""

import os
import sys
from typing import Any

from nodeopts.options.constants import INTEGER_MAX
from nodeopts.options.registry import OptionRegistry
from nodeopts.options.validators import VALIDATOR_TYPES, OptionValidator

_INT32_MAX = 2**31 - 1
_FLOAT_MAX = sys.float_info.max
_GB = 1024 * 1024 * 1024

# Default per-node width scales with the host, as the planner expects
_DEFAULT_MAX_WIDTH_PER_NODE = max(1, int((os.cpu_count() or 1) * 0.7))

OPTION_CATALOG: list[dict[str, Any]] = [
    # ── Planner: operators ────────────────────────────────────────────
    {
        "name": "planner.enable_constant_folding",
        "validator": "boolean",
        "default": True,
        "description": "Fold constant expressions during planning.",
    },
    {
        "name": "planner.disable_exchanges",
        "validator": "boolean",
        "default": False,
        "description": "Plan queries without exchanges (single fragment).",
    },
    {
        "name": "planner.enable_hashagg",
        "validator": "boolean",
        "default": True,
        "description": "Allow hash aggregation.",
    },
    {
        "name": "planner.enable_streamagg",
        "validator": "boolean",
        "default": True,
        "description": "Allow streaming aggregation.",
    },
    {
        "name": "planner.enable_hashjoin",
        "validator": "boolean",
        "default": True,
        "description": "Allow hash joins.",
    },
    {
        "name": "planner.enable_mergejoin",
        "validator": "boolean",
        "default": True,
        "description": "Allow merge joins.",
    },
    {
        "name": "planner.enable_nestedloopjoin",
        "validator": "boolean",
        "default": True,
        "description": "Allow nested loop joins.",
    },
    {
        "name": "planner.enable_multiphase_agg",
        "validator": "boolean",
        "default": True,
        "description": "Split aggregations into local and global phases.",
    },
    {
        "name": "planner.enable_broadcast_join",
        "validator": "boolean",
        "default": True,
        "description": "Allow broadcasting the smaller join input.",
    },
    {
        "name": "planner.broadcast_threshold",
        "validator": "positive_integer",
        "default": 10000000,
        "max_value": _INT32_MAX,
        "description": "Maximum estimated row count of a broadcast join input.",
    },
    {
        "name": "planner.broadcast_factor",
        "validator": "range_float",
        "default": 1.0,
        "min_value": 0.0,
        "max_value": _FLOAT_MAX,
        "description": "Cost multiplier applied to broadcast exchanges.",
    },
    {
        "name": "planner.nestedloopjoin_factor",
        "validator": "range_float",
        "default": 100.0,
        "min_value": 0.0,
        "max_value": _FLOAT_MAX,
        "description": "Cost multiplier applied to nested loop joins.",
    },
    {
        "name": "planner.enable_nljoin_for_scalar_only",
        "validator": "boolean",
        "default": True,
        "description": "Only use nested loop joins when one side is scalar.",
    },
    {
        "name": "planner.join.row_count_estimate_factor",
        "validator": "range_float",
        "default": 1.0,
        "min_value": 0.0,
        "max_value": 100.0,
        "description": "Multiplier for estimated join output row counts.",
    },
    {
        "name": "planner.enable_mux_exchange",
        "validator": "boolean",
        "default": True,
        "description": "Allow multiplexing exchanges.",
    },
    {
        "name": "planner.enable_demux_exchange",
        "validator": "boolean",
        "default": False,
        "description": "Allow demultiplexing exchanges.",
    },
    {
        "name": "planner.add_producer_consumer",
        "validator": "boolean",
        "default": False,
        "description": "Insert producer-consumer operators above scans.",
    },
    {
        "name": "planner.producer_consumer_queue_size",
        "validator": "positive_integer",
        "default": 10,
        "max_value": 100,
        "description": "Queue depth of producer-consumer operators.",
    },
    {
        "name": "planner.enable_hash_single_key",
        "validator": "boolean",
        "default": True,
        "description": "Hash on a single key when distributing.",
    },
    {
        "name": "planner.identifier_max_length",
        "validator": "range_integer",
        "default": 1024,
        "min_value": 128,
        "max_value": _INT32_MAX,
        "description": "Maximum length of an identifier in a query.",
    },
    {
        "name": "planner.enable_hashjoin_swap",
        "validator": "boolean",
        "default": True,
        "description": "Swap hash join inputs so the smaller side is built.",
    },
    {
        "name": "planner.join.hash_join_swap_margin_factor",
        "validator": "range_float",
        "default": 10.0,
        "min_value": 0.0,
        "max_value": 100.0,
        "description": "Percentage margin before hash join inputs are swapped.",
    },
    {
        "name": "planner.partitioner_sender_threads_factor",
        "validator": "integer",
        "default": 2,
        "description": "Rows per thread factor for partition senders.",
    },
    {
        "name": "planner.partitioner_sender_max_threads",
        "validator": "integer",
        "default": 8,
        "description": "Upper bound on partition sender threads.",
    },
    {
        "name": "planner.partitioner_sender_set_threads",
        "validator": "integer",
        "default": -1,
        "internal": True,
        "description": "Fixed partition sender thread count; -1 derives it.",
    },
    {
        "name": "planner.enable_decimal_data_type",
        "validator": "boolean",
        "default": False,
        "description": "Enable the DECIMAL data type.",
    },
    {
        "name": "planner.enable_hep_opt",
        "validator": "boolean",
        "default": True,
        "description": "Run the heuristic planner phase.",
    },
    {
        "name": "planner.memory_limit",
        "validator": "range_integer",
        "default": 2 * _GB,
        "min_value": 1,
        "max_value": INTEGER_MAX,
        "description": "Memory available to the planner, in bytes.",
    },
    {
        "name": "planner.enable_hep_partition_pruning",
        "validator": "boolean",
        "default": True,
        "internal": True,
        "description": "Prune partitions in the heuristic planner phase.",
    },
    {
        "name": "planner.filter.min_selectivity_estimate_factor",
        "validator": "range_float",
        "default": 0.0,
        "min_value": 0.0,
        "max_value": 1.0,
        "description": "Lower bound on filter selectivity estimates.",
    },
    {
        "name": "planner.filter.max_selectivity_estimate_factor",
        "validator": "range_float",
        "default": 1.0,
        "min_value": 0.0,
        "max_value": 1.0,
        "description": "Upper bound on filter selectivity estimates.",
    },
    {
        "name": "planner.enable_type_inference",
        "validator": "boolean",
        "default": True,
        "description": "Infer types during planning.",
    },
    {
        "name": "planner.in_subquery_threshold",
        "validator": "positive_integer",
        "default": 20,
        "max_value": _INT32_MAX,
        "description": "IN-list size above which a join replaces the filter.",
    },
    {
        "name": "planner.enable_unionall_distribute",
        "validator": "boolean",
        "default": False,
        "description": "Distribute UNION ALL inputs.",
    },
    {
        "name": "planner.store.parquet.rowgroup.filter.pushdown.enabled",
        "validator": "boolean",
        "default": True,
        "description": "Prune parquet row groups using filter statistics.",
    },
    {
        "name": "planner.store.parquet.rowgroup.filter.pushdown.threshold",
        "validator": "positive_integer",
        "default": 10000,
        "max_value": INTEGER_MAX,
        "description": "Row group count above which pushdown pruning is skipped.",
    },
    {
        "name": "planner.parser.quoting_identifiers",
        "validator": "enumerated_string",
        "default": "`",
        "choices": ("`", '"', "["),
        "description": "Character used to quote identifiers.",
    },
    {
        "name": "planner.enable_join_optimization",
        "validator": "boolean",
        "default": True,
        "description": "Reorder joins using cost estimates.",
    },
    {
        "name": "planner.enable_limit0_optimization",
        "validator": "boolean",
        "default": False,
        "description": "Answer LIMIT 0 queries from schema alone.",
    },
    {
        "name": "planner.cpu_load_average",
        "validator": "range_float",
        "default": 0.70,
        "min_value": 0.0,
        "max_value": 1.0,
        "description": "Fraction of cores used to derive per-node width.",
    },
    # ── Planner: parallelism ──────────────────────────────────────────
    {
        "name": "planner.slice_target",
        "validator": "positive_integer",
        "default": 100000,
        "description": "Estimated rows per parallel slice.",
    },
    {
        "name": "planner.affinity_factor",
        "validator": "float",
        "default": 1.2,
        "description": "Weight given to data locality when assigning fragments.",
    },
    {
        "name": "planner.width.max_per_query",
        "validator": "positive_integer",
        "default": 1000,
        "description": "Maximum parallel fragments per query across the cluster.",
    },
    {
        "name": "planner.width.max_per_node",
        "validator": "positive_integer",
        "default": _DEFAULT_MAX_WIDTH_PER_NODE,
        "description": "Maximum parallel fragments per query on one node.",
    },
    # ── Planner: memory ───────────────────────────────────────────────
    {
        "name": "planner.memory.enable_memory_estimation",
        "validator": "boolean",
        "default": False,
        "description": "Estimate operator memory during planning.",
    },
    {
        "name": "planner.memory.max_query_memory_per_node",
        "validator": "positive_integer",
        "default": 2 * _GB,
        "description": "Memory budget of one query on one node, in bytes.",
    },
    {
        "name": "planner.memory.non_blocking_operators_memory",
        "validator": "power_of_two_integer",
        "default": 64,
        "max_value": 2048,
        "description": "Memory for non-blocking operators, in megabytes.",
    },
    {
        "name": "planner.memory.hash_join_table_factor",
        "validator": "float",
        "default": 1.1,
        "description": "Sizing factor for hash join tables.",
    },
    {
        "name": "planner.memory.hash_agg_table_factor",
        "validator": "float",
        "default": 1.1,
        "description": "Sizing factor for hash aggregation tables.",
    },
    {
        "name": "planner.memory.average_field_width",
        "validator": "positive_integer",
        "default": 8,
        "description": "Assumed average field width in bytes.",
    },
    # ── Storage formats ───────────────────────────────────────────────
    {
        "name": "store.parquet.reader.int96_as_timestamp",
        "validator": "boolean",
        "default": False,
        "description": "Read parquet INT96 columns as timestamps.",
    },
    {
        "name": "store.text.estimated_row_size_bytes",
        "validator": "range_integer",
        "default": 100,
        "min_value": 1,
        "max_value": INTEGER_MAX,
        "description": "Estimated row size of text files for planning.",
    },
    {
        "name": "store.json.extended_types",
        "validator": "boolean",
        "default": False,
        "description": "Read and write JSON extended types.",
    },
    {
        "name": "store.json.writer.uglify",
        "validator": "boolean",
        "default": False,
        "description": "Write compact JSON without whitespace.",
    },
    {
        "name": "store.json.writer.skip_null_fields",
        "validator": "boolean",
        "default": True,
        "description": "Omit null fields when writing JSON.",
    },
    # ── Execution ─────────────────────────────────────────────────────
    {
        "name": "exec.functions.cast_empty_string_to_null",
        "validator": "boolean",
        "default": False,
        "description": "Cast empty strings to NULL for numeric targets.",
    },
    {
        "name": "exec.enable_union_type",
        "validator": "boolean",
        "default": False,
        "description": "Enable the UNION data type.",
    },
    {
        "name": "exec.min_hash_table_size",
        "validator": "positive_integer",
        "default": 65536,
        "max_value": 1073741824,
        "description": "Initial hash table capacity.",
    },
    {
        "name": "exec.max_hash_table_size",
        "validator": "positive_integer",
        "default": 1073741824,
        "max_value": 1073741824,
        "description": "Maximum hash table capacity.",
    },
    {
        "name": "exec.java_compiler_janino_maxsize",
        "validator": "integer",
        "default": 262144,
        "description": "Source size above which the JDK compiler is used.",
    },
    {
        "name": "exec.java_compiler_debug",
        "validator": "boolean",
        "default": True,
        "description": "Include debug information in generated classes.",
    },
    {
        "name": "exec.errors.verbose",
        "validator": "boolean",
        "default": False,
        "description": "Return verbose error details to clients.",
    },
    {
        "name": "exec.storage.enable_new_text_reader",
        "validator": "boolean",
        "default": True,
        "description": "Use the newer text reader.",
    },
    {
        "name": "exec.enable_bulk_load_table_list",
        "validator": "boolean",
        "default": False,
        "description": "Load table lists from storage plugins in bulk.",
    },
    {
        "name": "exec.bulk_load_table_list.bulk_size",
        "validator": "positive_integer",
        "default": 1000,
        "max_value": _INT32_MAX,
        "internal": True,
        "description": "Tables fetched per bulk load call.",
    },
    {
        "name": "exec.sort.disable_managed",
        "validator": "boolean",
        "default": False,
        "internal": True,
        "description": "Fall back to the unmanaged external sort.",
    },
    {
        "name": "exec.udf.use_dynamic",
        "validator": "boolean",
        "default": True,
        "description": "Allow dynamically registered functions.",
    },
    {
        "name": "exec.query.progress.update",
        "validator": "boolean",
        "default": True,
        "internal": True,
        "description": "Persist query progress while running.",
    },
    {
        "name": "exec.testing.controls",
        "validator": "string",
        "default": "{}",
        "internal": True,
        "description": "Fault injection controls for testing.",
    },
    # ── Admission queue ───────────────────────────────────────────────
    {
        "name": "exec.queue.enable",
        "validator": "boolean",
        "default": False,
        "description": "Route queries through the admission queue.",
    },
    {
        "name": "exec.queue.large",
        "validator": "range_integer",
        "default": 10,
        "min_value": 1,
        "max_value": 1000,
        "description": "Concurrent large queries allowed.",
    },
    {
        "name": "exec.queue.small",
        "validator": "range_integer",
        "default": 100,
        "min_value": 1,
        "max_value": 100000,
        "description": "Concurrent small queries allowed.",
    },
    {
        "name": "exec.queue.threshold",
        "validator": "positive_integer",
        "default": 30000000,
        "description": "Query cost separating small from large queries.",
    },
    {
        "name": "exec.queue.timeout_millis",
        "validator": "positive_integer",
        "default": 300000,
        "description": "Time a query may wait in the queue, in milliseconds.",
    },
]

# Catalog keys that are not constructor arguments for any validator
_RESERVED_KEYS = {"name", "validator", "default"}


def build_validator(entry: dict[str, Any]) -> OptionValidator:
    """Create the descriptor for one catalog entry."""
    try:
        validator_cls = VALIDATOR_TYPES[entry["validator"]]
    except KeyError:
        raise ValueError(
            f"Option '{entry.get('name', '?')}' has unknown validator: {entry.get('validator')}"
        )
    kwargs = {k: v for k, v in entry.items() if k not in _RESERVED_KEYS}
    return validator_cls(entry["name"], entry["default"], **kwargs)


def build_validators(catalog: list[dict[str, Any]]) -> list[OptionValidator]:
    return [build_validator(entry) for entry in catalog]


def create_default_registry() -> OptionRegistry:
    """Build the registry of every cataloged option with compiled-in defaults."""
    return OptionRegistry.build(build_validators(OPTION_CATALOG))
