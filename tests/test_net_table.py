import pytest

from circgraph.builders.net_table import NetTable, build_net_table
from circgraph.core.errors import MultipleDriverError
from circgraph.core.graph import Endpoint
from circgraph.parsers import build_modules

from netlists import gate, inp, module, netlist, out


def test_intern_returns_same_net_for_equal_keys():
    nets = NetTable("top")
    first = nets.intern((2, 3, 4))
    assert nets.intern([2, 3, 4]) is first
    assert first.driver is None
    assert first.consumers == []
    assert len(nets) == 1


def test_reordered_and_partial_keys_are_distinct_nets():
    nets = NetTable("top")
    nets.intern((2, 3, 4))
    nets.intern((4, 3, 2))
    nets.intern((2, 3))
    assert len(nets) == 3


def test_second_driver_is_rejected():
    nets = NetTable("top")
    nets.record_driver((2, 3), Endpoint("dev0", "out"))
    with pytest.raises(MultipleDriverError) as excinfo:
        nets.record_driver((2, 3), Endpoint("dev1", "out"))

    err = excinfo.value
    assert err.net == (2, 3)
    assert err.existing == Endpoint("dev0", "out")
    assert err.new == Endpoint("dev1", "out")
    assert "top" in str(err)
    assert nets.get((2, 3)).driver == Endpoint("dev0", "out")


def test_consumers_keep_insertion_order():
    nets = NetTable("top")
    nets.record_consumer((5,), Endpoint("dev2", "in1"))
    nets.record_consumer((5,), Endpoint("dev1", "in"))
    assert nets.get((5,)).consumers == [Endpoint("dev2", "in1"), Endpoint("dev1", "in")]
    assert nets.undriven() == [(5,)]


def test_build_net_table_interns_ports_and_cell_connections():
    modules = build_modules(
        netlist(
            top=module(
                ports={"a": inp(2, 3), "y": out(4, 5)},
                cells={"inv": gate("$not", [4, 5], [3, 2])},
            )
        )
    )
    nets = build_net_table(modules["top"])
    assert list(nets) == [(2, 3), (4, 5), (3, 2)]
    assert all(nets.get(k).driver is None for k in nets)
