"""
Built-in SDC Command Table
==========================
Argument schemas for the SDC 2.x command set plus the TCL built-ins that
commonly appear in constraint files. This is configuration data: the
checker consults it, it contains no logic.
"""
from .registry import ArgKind, ArgSpec, CommandRegistry, CommandSpec


def _kv(name: str, validator: str | None = None, required: bool = False) -> ArgSpec:
    return ArgSpec(name, ArgKind.KEY_VALUE, required=required, validator=validator)


def _flag(*names: str) -> tuple[ArgSpec, ...]:
    return tuple(ArgSpec(n, ArgKind.FLAG, value_less=True) for n in names)


def _pos(name: str, validator: str | None = None) -> ArgSpec:
    return ArgSpec(name, ArgKind.POSITIONAL, validator=validator)


def _cmd(name: str, *args, min_pos: int = 0, max_pos: int = -1, desc: str = "") -> CommandSpec:
    flat: list[ArgSpec] = []
    for a in args:
        if isinstance(a, tuple):
            flat.extend(a)
        else:
            flat.append(a)
    return CommandSpec(name, tuple(flat), min_pos, max_pos, desc)


_MIN_MAX = _flag("-min", "-max")
_RISE_FALL = _flag("-rise", "-fall")
_OBJECT_QUERY = (
    _flag("-quiet", "-regexp", "-nocase", "-hierarchical", "-exact"),
    _kv("-filter"),
    _kv("-of_objects"),
)
_PATH_ENDPOINTS = (
    _kv("-from"), _kv("-to"), _kv("-through"),
    _kv("-rise_from"), _kv("-fall_from"),
    _kv("-rise_to"), _kv("-fall_to"),
    _kv("-rise_through"), _kv("-fall_through"),
    _kv("-comment"),
)
_IO_DELAY = (
    _kv("-clock"), _kv("-reference_pin"),
    _flag("-clock_fall", "-level_sensitive", "-add_delay",
          "-network_latency_included", "-source_latency_included"),
    _RISE_FALL, _MIN_MAX,
    _pos("delay_value", "real"),
)


BUILTIN_COMMANDS: tuple[CommandSpec, ...] = (
    # ── Clocks ────────────────────────────────────────────────
    _cmd("create_clock",
         _kv("-name"), _kv("-period", "clock_period", required=True),
         _kv("-waveform", "waveform"), _kv("-comment"), _flag("-add"),
         min_pos=0, max_pos=-1,
         desc="Define a clock on ports/pins, or a virtual clock with -name"),
    _cmd("create_generated_clock",
         _kv("-name"), _kv("-source", required=True), _kv("-master_clock"),
         _kv("-divide_by", "positive_integer"), _kv("-multiply_by", "positive_integer"),
         _kv("-duty_cycle", "percentage"), _kv("-edges", "edge_list"),
         _kv("-edge_shift", "number_list"), _kv("-comment"),
         _flag("-invert", "-add", "-combinational"),
         min_pos=1, max_pos=-1,
         desc="Define a clock derived from a master clock"),
    _cmd("set_clock_groups",
         _kv("-name"), _kv("-group"), _kv("-comment"),
         _flag("-logically_exclusive", "-physically_exclusive", "-asynchronous", "-allow_paths"),
         min_pos=0, max_pos=0,
         desc="Declare mutually exclusive or asynchronous clock groups"),
    _cmd("set_clock_latency",
         _kv("-clock"), _flag("-source", "-early", "-late", "-dynamic"),
         _RISE_FALL, _MIN_MAX, _pos("latency", "real"),
         min_pos=2, max_pos=2),
    _cmd("set_clock_uncertainty",
         _kv("-from"), _kv("-to"), _kv("-rise_from"), _kv("-fall_from"),
         _kv("-rise_to"), _kv("-fall_to"),
         _flag("-setup", "-hold"), _RISE_FALL, _pos("uncertainty", "clock_uncertainty"),
         min_pos=1, max_pos=2),
    _cmd("set_clock_jitter",
         _kv("-cycle", "clock_jitter"), _kv("-duty_cycle", "clock_jitter"),
         _kv("-clock"),
         min_pos=0, max_pos=1),
    _cmd("set_clock_transition",
         _RISE_FALL, _MIN_MAX, _pos("transition", "transition_time"),
         min_pos=2, max_pos=2),
    _cmd("set_propagated_clock", min_pos=1, max_pos=1),
    _cmd("set_clock_sense",
         _flag("-positive", "-negative", "-stop_propagation"),
         _kv("-pulse"), _kv("-clocks"),
         min_pos=1, max_pos=1),
    _cmd("set_clock_gating_check",
         _kv("-setup", "path_margin"), _kv("-hold", "path_margin"),
         _flag("-high", "-low"), _RISE_FALL,
         min_pos=0, max_pos=1),
    _cmd("set_ideal_latency", _RISE_FALL, _MIN_MAX, _pos("latency", "real"),
         min_pos=2, max_pos=2),
    _cmd("set_ideal_network", _flag("-no_propagate"), min_pos=1, max_pos=1),
    _cmd("set_ideal_transition", _RISE_FALL, _MIN_MAX, _pos("transition", "transition_time"),
         min_pos=2, max_pos=2),

    # ── I/O constraints ───────────────────────────────────────
    _cmd("set_input_delay", *_IO_DELAY, min_pos=2, max_pos=2),
    _cmd("set_output_delay", *_IO_DELAY, min_pos=2, max_pos=2),
    _cmd("set_input_transition",
         _kv("-clock"), _flag("-clock_fall"), _RISE_FALL, _MIN_MAX,
         _pos("transition", "transition_time"),
         min_pos=2, max_pos=2),
    _cmd("set_driving_cell",
         _kv("-lib_cell"), _kv("-library"), _kv("-pin"), _kv("-from_pin"),
         _kv("-input_transition_rise", "transition_time"),
         _kv("-input_transition_fall", "transition_time"),
         _kv("-clock"), _kv("-multiply_by", "positive_real"),
         _flag("-clock_fall", "-dont_scale", "-no_design_rule"), _RISE_FALL, _MIN_MAX,
         min_pos=1, max_pos=1),
    _cmd("set_drive", _RISE_FALL, _MIN_MAX, _pos("resistance", "non_negative_real"),
         min_pos=2, max_pos=2),
    _cmd("set_load",
         _flag("-subtract_pin_load", "-pin_load", "-wire_load"), _MIN_MAX,
         _pos("capacitance", "capacitance_value"),
         min_pos=2, max_pos=2),
    _cmd("set_fanout_load", _pos("value", "non_negative_real"), min_pos=2, max_pos=2),
    _cmd("set_port_fanout_number", _pos("value", "non_negative_integer"),
         min_pos=2, max_pos=2),

    # ── Timing exceptions ─────────────────────────────────────
    _cmd("set_false_path", *_PATH_ENDPOINTS, _flag("-setup", "-hold"), _RISE_FALL,
         min_pos=0, max_pos=0),
    _cmd("set_multicycle_path", *_PATH_ENDPOINTS,
         _flag("-setup", "-hold", "-start", "-end"), _RISE_FALL,
         _pos("path_multiplier", "positive_integer"),
         min_pos=1, max_pos=1),
    _cmd("set_max_delay", *_PATH_ENDPOINTS,
         _flag("-ignore_clock_latency"), _RISE_FALL, _pos("delay_value", "real"),
         min_pos=1, max_pos=1),
    _cmd("set_min_delay", *_PATH_ENDPOINTS,
         _flag("-ignore_clock_latency"), _RISE_FALL, _pos("delay_value", "real"),
         min_pos=1, max_pos=1),
    _cmd("set_disable_timing", _kv("-from"), _kv("-to"), min_pos=1, max_pos=1),
    _cmd("set_max_time_borrow", _pos("delay_value", "delay_value"), min_pos=2, max_pos=2),
    _cmd("set_min_pulse_width", _flag("-low", "-high"), _pos("value", "delay_value"),
         min_pos=1, max_pos=2),
    _cmd("set_data_check",
         _kv("-from"), _kv("-to"), _kv("-rise_from"), _kv("-fall_from"),
         _kv("-rise_to"), _kv("-fall_to"), _kv("-clock"),
         _flag("-setup", "-hold"), _pos("value", "real"),
         min_pos=1, max_pos=1),
    _cmd("group_path",
         _kv("-name"), _kv("-weight", "positive_real"), *_PATH_ENDPOINTS, _flag("-default"),
         min_pos=0, max_pos=0),

    # ── Design rules / environment ────────────────────────────
    _cmd("set_case_analysis", min_pos=2, max_pos=2),
    _cmd("set_logic_dc", min_pos=1, max_pos=1),
    _cmd("set_logic_one", min_pos=1, max_pos=1),
    _cmd("set_logic_zero", min_pos=1, max_pos=1),
    _cmd("set_max_transition", _flag("-clock_path", "-data_path"), _RISE_FALL,
         _pos("transition", "transition_time"),
         min_pos=2, max_pos=2),
    _cmd("set_max_capacitance", _pos("capacitance", "capacitance_value"),
         min_pos=2, max_pos=2),
    _cmd("set_min_capacitance", _pos("capacitance", "capacitance_value"),
         min_pos=2, max_pos=2),
    _cmd("set_max_fanout", _pos("value", "non_negative_real"), min_pos=2, max_pos=2),
    _cmd("set_max_area", _pos("area", "non_negative_real"), min_pos=1, max_pos=1),
    _cmd("set_max_dynamic_power", _pos("power", "power"), min_pos=1, max_pos=2),
    _cmd("set_max_leakage_power", _pos("power", "power"), min_pos=1, max_pos=2),
    _cmd("set_resistance", _MIN_MAX, _pos("value", "resistance"), min_pos=2, max_pos=2),
    _cmd("set_timing_derate",
         _flag("-cell_delay", "-cell_check", "-net_delay", "-data", "-clock",
               "-early", "-late", "-static", "-dynamic", "-increment"),
         _RISE_FALL, _pos("derate", "positive_real"),
         min_pos=1, max_pos=2),
    _cmd("set_operating_conditions",
         _kv("-library"), _kv("-analysis_type"), _kv("-max"), _kv("-min"),
         _kv("-max_library"), _kv("-min_library"), _kv("-object_list"),
         min_pos=0, max_pos=1),
    _cmd("set_wire_load_mode", min_pos=1, max_pos=1),
    _cmd("set_wire_load_model", _kv("-name", required=True), _kv("-library"), _MIN_MAX,
         min_pos=0, max_pos=-1),
    _cmd("set_wire_load_min_block_size", _pos("size", "non_negative_real"),
         min_pos=1, max_pos=1),
    _cmd("set_wire_load_selection_group", _kv("-library"), _MIN_MAX,
         min_pos=1, max_pos=2),
    _cmd("set_voltage", _kv("-min", "voltage"), _kv("-object_list"),
         _pos("value", "voltage"),
         min_pos=1, max_pos=1),
    _cmd("set_level_shifter_strategy", _kv("-rule"), min_pos=0, max_pos=0),
    _cmd("set_level_shifter_threshold",
         _kv("-voltage", "voltage"), _kv("-percent", "percentage"),
         min_pos=0, max_pos=0),
    _cmd("set_glitch_threshold", _pos("threshold", "glitch_threshold"),
         min_pos=1, max_pos=2),
    _cmd("set_max_current", _pos("current", "current"), min_pos=2, max_pos=2),
    _cmd("set_max_net_length", _pos("length", "distance"), min_pos=2, max_pos=2),
    _cmd("set_dont_touch", min_pos=1, max_pos=2),
    _cmd("set_dont_touch_network", _flag("-no_propagate"), min_pos=1, max_pos=1),
    _cmd("set_dont_use", min_pos=1, max_pos=2),
    _cmd("set_size_only", _flag("-all_instances"), min_pos=1, max_pos=2),
    _cmd("set_units",
         _kv("-time", "time"), _kv("-capacitance", "capacitance"),
         _kv("-current", "current"), _kv("-voltage", "voltage"),
         _kv("-resistance", "resistance"), _kv("-power", "power"),
         min_pos=0, max_pos=0),
    _cmd("set_hierarchy_separator", _pos("separator"),
         min_pos=1, max_pos=1),

    # ── Object access ─────────────────────────────────────────
    _cmd("current_design", min_pos=0, max_pos=1),
    _cmd("current_instance", min_pos=0, max_pos=1),
    _cmd("get_ports", *_OBJECT_QUERY),
    _cmd("get_pins", *_OBJECT_QUERY, _flag("-leaf")),
    _cmd("get_cells", *_OBJECT_QUERY),
    _cmd("get_nets", *_OBJECT_QUERY),
    _cmd("get_clocks", *_OBJECT_QUERY),
    _cmd("get_lib_cells", *_OBJECT_QUERY),
    _cmd("get_lib_pins", *_OBJECT_QUERY),
    _cmd("get_libs", *_OBJECT_QUERY),
    _cmd("all_inputs", _flag("-level_sensitive", "-edge_triggered"), _kv("-clock"),
         min_pos=0, max_pos=0),
    _cmd("all_outputs", _flag("-level_sensitive", "-edge_triggered"), _kv("-clock"),
         min_pos=0, max_pos=0),
    _cmd("all_clocks", min_pos=0, max_pos=0),
    _cmd("all_registers",
         _flag("-no_hierarchy", "-cells", "-data_pins", "-clock_pins", "-slave_clock_pins",
               "-async_pins", "-output_pins", "-level_sensitive", "-edge_triggered",
               "-master_slave"),
         _kv("-clock"), _kv("-rise_clock"), _kv("-fall_clock"),
         min_pos=0, max_pos=0),
    _cmd("all_fanin", _kv("-to", required=True), _flag("-flat", "-only_cells", "-startpoints_only"),
         min_pos=0, max_pos=0),
    _cmd("all_fanout", _kv("-from", required=True), _flag("-flat", "-only_cells", "-endpoints_only"),
         min_pos=0, max_pos=0),

    # ── TCL built-ins ─────────────────────────────────────────
    _cmd("set", min_pos=1, max_pos=2),
    _cmd("unset", _flag("-nocomplain"), min_pos=1, max_pos=-1),
    _cmd("puts", _flag("-nonewline"), min_pos=1, max_pos=2),
    _cmd("echo", min_pos=0, max_pos=-1),
    _cmd("expr", min_pos=1, max_pos=-1),
    _cmd("source", _flag("-echo", "-verbose"), min_pos=1, max_pos=1),
    _cmd("list", min_pos=0, max_pos=-1),
    _cmd("lappend", min_pos=1, max_pos=-1),
    _cmd("append", min_pos=1, max_pos=-1),
    _cmd("incr", min_pos=1, max_pos=2),
    _cmd("foreach", min_pos=3, max_pos=-1),
    _cmd("if", min_pos=2, max_pos=-1),
    _cmd("proc", min_pos=3, max_pos=3),
    _cmd("return", min_pos=0, max_pos=1),
)


# TCL built-ins take arbitrary words, not object lists
TCL_BUILTINS = frozenset({
    "set", "unset", "puts", "echo", "expr", "source", "list", "lappend",
    "append", "incr", "foreach", "if", "proc", "return",
})

# commands whose braced bodies are scripts evaluated later
TCL_CONTROL = frozenset({"foreach", "if", "proc"})

DEFAULT_REGISTRY = CommandRegistry(BUILTIN_COMMANDS)
