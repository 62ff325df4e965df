import pytest

from circgraph.builders.bus_reconcile import add_bus_slices, split_runs
from circgraph.builders.context import CompileContext
from circgraph.builders.net_table import NetTable
from circgraph.core.errors import SliceSourceError
from circgraph.core.graph import Connector, DeviceType, DiagnosticKind, Endpoint, Polarity, SliceSpec

from netlists import compile_single, gate, inp, module, out


def bus_devices(graph):
    kinds = {DeviceType.BUS_GROUP, DeviceType.BUS_SLICE, DeviceType.CONSTANT}
    return [d for d in graph.devices.values() if d.type in kinds]


def test_contiguous_driver_needs_no_bus_device():
    graph = compile_single(
        module(ports={"a": inp(2, 3, 4), "y": out(5, 6, 7)}, cells={"inv": gate("$not", [5, 6, 7], [2, 3, 4])})
    )
    assert bus_devices(graph) == []
    assert Connector(Endpoint("dev2", "out"), Endpoint("dev1", "in")) in graph.connectors
    assert graph.diagnostics == ()


def test_reversed_bits_become_a_group_of_single_bit_slices():
    graph = compile_single(
        module(ports={"a": inp(2, 3, 4), "y": out(7, 6, 5)}, cells={"inv": gate("$not", [5, 6, 7], [2, 3, 4])})
    )
    group = graph.devices["dev3"]
    assert group.type == DeviceType.BUS_GROUP
    assert group.groups == (1, 1, 1)
    assert group.bits == 3

    slices = [graph.devices[f"dev{i}"] for i in (4, 5, 6)]
    assert [s.slice_spec for s in slices] == [
        SliceSpec(first=2, count=1, total=3),
        SliceSpec(first=1, count=1, total=3),
        SliceSpec(first=0, count=1, total=3),
    ]
    assert Connector(Endpoint("dev3", "out"), Endpoint("dev1", "in")) in graph.connectors
    for index, slice_id in enumerate(("dev4", "dev5", "dev6")):
        assert Connector(Endpoint("dev2", "out"), Endpoint(slice_id, "in")) in graph.connectors
        assert Connector(Endpoint(slice_id, "out"), Endpoint("dev3", f"in{index}")) in graph.connectors
    assert len(graph.connectors) == 8


def test_all_constant_net_becomes_constant_device():
    graph = compile_single(module(ports={"y": out("0", "1", "0")}))

    const = graph.devices["dev1"]
    assert const.type == DeviceType.CONSTANT
    assert const.constant == (Polarity.LOW, Polarity.HIGH, Polarity.LOW)
    assert [p.value for p in const.constant] == [-1, 1, -1]
    assert graph.connectors_to("dev1") == []
    assert graph.connectors == (Connector(Endpoint("dev1", "out"), Endpoint("dev0", "in")),)


def test_single_constant_bit_on_gate_input():
    graph = compile_single(
        module(ports={"a": inp(2), "y": out(3)}, cells={"g": gate("$and", [3], [2], ["1"])})
    )
    const = graph.devices["dev3"]
    assert const.type == DeviceType.CONSTANT
    assert const.constant == (Polarity.HIGH,)
    assert Connector(Endpoint("dev3", "out"), Endpoint("dev2", "in2")) in graph.connectors


def test_sub_range_of_wider_port_becomes_slice():
    graph = compile_single(module(ports={"a": inp(*range(2, 10)), "y": out(5, 6)}))

    slc = graph.devices["dev2"]
    assert slc.type == DeviceType.BUS_SLICE
    assert slc.slice_spec == SliceSpec(first=3, count=2, total=8)
    assert slc.bits == 2
    assert set(graph.connectors) == {
        Connector(Endpoint("dev0", "out"), Endpoint("dev2", "in")),
        Connector(Endpoint("dev2", "out"), Endpoint("dev1", "in")),
    }


def test_mixed_net_groups_slices_and_constants():
    graph = compile_single(module(ports={"a": inp(*range(2, 10)), "y": out(2, 3, "1", 9)}))

    group = graph.devices["dev2"]
    assert group.type == DeviceType.BUS_GROUP
    assert group.groups == (2, 1, 1)

    const = graph.devices["dev3"]
    assert const.type == DeviceType.CONSTANT
    assert const.constant == (Polarity.HIGH,)

    low, high = graph.devices["dev4"], graph.devices["dev5"]
    assert low.slice_spec == SliceSpec(first=0, count=2, total=8)
    assert high.slice_spec == SliceSpec(first=7, count=1, total=8)

    assert Connector(Endpoint("dev4", "out"), Endpoint("dev2", "in0")) in graph.connectors
    assert Connector(Endpoint("dev3", "out"), Endpoint("dev2", "in1")) in graph.connectors
    assert Connector(Endpoint("dev5", "out"), Endpoint("dev2", "in2")) in graph.connectors


def test_undriven_net_is_diagnosed_and_has_no_connectors():
    graph = compile_single(
        module(ports={"a": inp(2), "y": out(4)}, cells={"g": gate("$and", [4], [2], [3])})
    )
    assert [d.kind for d in graph.diagnostics] == [DiagnosticKind.UNDRIVEN_NET]
    assert graph.diagnostics[0].net == (3,)
    assert graph.diagnostics[0].module == "top"
    assert all(c.target != Endpoint("dev2", "in2") for c in graph.connectors)
    assert len(graph.connectors) == 2


def test_partially_driven_net_groups_the_unresolved_run():
    graph = compile_single(module(ports={"a": inp(2), "y": out(2, 30, 31)}))

    group = graph.devices["dev2"]
    assert group.groups == (1, 2)
    assert [d.net for d in graph.diagnostics] == [(30, 31)]
    assert Connector(Endpoint("dev0", "out"), Endpoint("dev2", "in0")) in graph.connectors
    assert all(c.target != Endpoint("dev2", "in1") for c in graph.connectors)


def test_unrecognized_cell_outputs_can_be_sliced():
    graph = compile_single(
        module(
            ports={"s": inp(2), "y": out(5)},
            cells={
                "m": {
                    "type": "$reduce_foo",
                    "connections": {"A": [2], "Y": [4, 5, 6]},
                    "port_directions": {"A": "input", "Y": "output"},
                }
            },
        )
    )
    slc = graph.devices["dev3"]
    assert slc.slice_spec == SliceSpec(first=1, count=1, total=3)
    assert Connector(Endpoint("dev2", "Y"), Endpoint("dev3", "in")) in graph.connectors


def test_split_runs_keeps_contiguous_driver_positions_together():
    graph_nets = NetTable("top")
    ctx = CompileContext("top", graph_nets)
    ctx.new_device_id()
    ctx.add_source((10, 11, 12, 13), "dev0", "out", track_bits=True)

    assert split_runs(ctx, (11, 12, 0, 1, 10, 40, 41)) == [(11, 12), (0, 1), (10,), (40, 41)]
    assert split_runs(ctx, (10, 11, 12, 13)) == [(10, 11, 12, 13)]
    assert split_runs(ctx, ()) == []


def test_slice_over_two_drivers_is_a_contract_violation():
    ctx = CompileContext("top", NetTable("top"))
    ctx.new_device_id()
    ctx.new_device_id()
    ctx.add_source((2, 3), "dev0", "out", track_bits=True)
    ctx.add_source((4, 5), "dev1", "out", track_bits=True)
    ctx.nets.intern((3, 4))

    with pytest.raises(SliceSourceError) as excinfo:
        add_bus_slices(ctx)
    assert excinfo.value.net == (3, 4)
    assert excinfo.value.drivers == [("dev0", "out"), ("dev1", "out")]
