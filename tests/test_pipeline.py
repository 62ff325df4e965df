import dataclasses
import json

import pytest

from circgraph import CircuitPipeline, CompileConfig, compile_netlist
from circgraph.builders.toplevel import interactive_terminal
from circgraph.core.errors import HierarchyCycleError, UndrivenNetError
from circgraph.core.graph import Device, DeviceType, DiagnosticKind

from netlists import cell, gate, inp, module, netlist, out


def test_top_level_embeds_other_modules(hierarchy):
    circuit = compile_netlist(hierarchy)

    assert circuit.name == "top"
    assert list(circuit.subcircuits) == ["leaf", "mid"]
    assert circuit.subcircuits["leaf"].subcircuits == {}

    u_mid = next(d for d in circuit.devices.values() if d.label == "u_mid")
    assert u_mid.type == DeviceType.SUBCIRCUIT
    assert u_mid.type_name == "mid"

    mid_ports = {c.target.port for c in circuit.connectors_to(u_mid.device_id)}
    assert mid_ports == {"a"}
    assert {c.source.port for c in circuit.connectors_from(u_mid.device_id)} == {"y"}


def test_top_level_terminals_become_interactive(hierarchy):
    circuit = compile_netlist(hierarchy)

    by_label = {d.label: d for d in circuit.devices.values()}
    assert by_label["a"].type == DeviceType.BUTTON
    assert by_label["bus"].type == DeviceType.NUM_ENTRY
    assert by_label["y"].type == DeviceType.LAMP
    assert by_label["q"].type == DeviceType.NUM_DISPLAY

    leaf_types = {d.type for d in circuit.subcircuits["leaf"].devices.values()}
    assert leaf_types == {DeviceType.INPUT, DeviceType.OUTPUT, DeviceType.NOT}


def test_interactive_terminals_can_be_disabled(hierarchy):
    circuit = compile_netlist(hierarchy, CompileConfig(interactive_io=False))
    types = {d.label: d.type for d in circuit.devices.values()}
    assert types["a"] == DeviceType.INPUT
    assert types["q"] == DeviceType.OUTPUT


def test_interactive_terminal_leaves_gates_alone():
    gate_dev = Device(device_id="dev3", type=DeviceType.AND, bits=1)
    assert interactive_terminal(gate_dev) is gate_dev


def test_explicit_top_module(hierarchy):
    circuit = compile_netlist(hierarchy, CompileConfig(top_module="mid"))
    assert circuit.name == "mid"
    assert set(circuit.subcircuits) == {"leaf", "top"}


def test_cyclic_hierarchy_fails_before_compilation():
    data = netlist(
        m1=module(cells={"u": cell("m2", {"a": [2]}, {"y": [3]})}),
        m2=module(cells={"u": cell("m1", {"a": [2]}, {"y": [3]})}),
    )
    pipeline = CircuitPipeline()
    pipeline.load_yosys(data)
    with pytest.raises(HierarchyCycleError):
        pipeline.compile()
    assert pipeline.compiled == {}


def test_ambiguous_top_is_reported():
    circuit = compile_netlist(netlist(b_mod=module(ports={"a": inp(2)}), a_mod=module(ports={"a": inp(2)})))
    assert circuit.name == "a_mod"
    kinds = [d.kind for d in circuit.diagnostics]
    assert DiagnosticKind.AMBIGUOUS_TOP in kinds


def test_strict_mode_rejects_undriven_nets():
    data = netlist(top=module(ports={"y": out(4)}, cells={"g": gate("$not", [4], [3])}))
    with pytest.raises(UndrivenNetError) as excinfo:
        compile_netlist(data, CompileConfig(strict_undriven=True))
    assert excinfo.value.nets == [(3,)]

    circuit = compile_netlist(data)
    assert [d.net for d in circuit.all_diagnostics()] == [(3,)]


def test_diagnostics_collected_from_subcircuits():
    data = netlist(
        child=module(ports={"y": out(4)}, cells={"g": gate("$not", [4], [3])}),
        top=module(ports={"y": out(2)}, cells={"u": cell("child", {}, {"y": [2]})}),
    )
    pipeline = CircuitPipeline()
    pipeline.load_yosys(data)
    pipeline.compile()
    diags = pipeline.diagnostics()
    assert [(d.module, d.kind) for d in diags] == [("child", DiagnosticKind.UNDRIVEN_NET)]
    assert pipeline.get_module("child").name == "child"
    assert pipeline.get_module("top") is pipeline.get_circuit()


def test_compiled_graph_is_immutable(hierarchy):
    circuit = compile_netlist(hierarchy)
    with pytest.raises(dataclasses.FrozenInstanceError):
        circuit.name = "other"
    device = next(iter(circuit.devices.values()))
    with pytest.raises(dataclasses.FrozenInstanceError):
        device.bits = 99


def test_compile_requires_loaded_netlist():
    with pytest.raises(RuntimeError):
        CircuitPipeline().compile()
    with pytest.raises(RuntimeError):
        CircuitPipeline().get_circuit()


def test_layout_option_positions_every_device(hierarchy):
    circuit = compile_netlist(hierarchy, CompileConfig(layout=True))
    assert all(d.position is not None for d in circuit.devices.values())
    assert circuit.width is not None and circuit.height is not None
    assert all(d.position is not None for d in circuit.subcircuits["leaf"].devices.values())


def test_load_netlist_and_cache_round_trip(tmp_path, hierarchy):
    src = tmp_path / "design.json"
    src.write_text(json.dumps(hierarchy), encoding="utf-8")

    pipeline = CircuitPipeline()
    pipeline.load_netlist(src)
    circuit = pipeline.compile()
    cache = tmp_path / "cache" / "circuit.json"
    pipeline.save_cache(cache)

    restored = CircuitPipeline.load_from_cache(cache)
    assert restored.source_hash == pipeline.source_hash
    assert restored.get_circuit().devices == circuit.devices
    assert restored.get_circuit().connectors == circuit.connectors
    assert restored.get_circuit().name == "top"
