"""
Bus reconciliation.

After port and cell devices are in place, some nets are still undriven as a
unit: a cell input may read a reordered mix of bits from several drivers, a
run of literal constants, or a sub-range of a wider output. Three passes run
in fixed order over those nets, each synthesizing one device per net:

1. group   - split the bits into runs that are contiguous in one driver's
             output (or all constant) and rebuild the net with a $busgroup
2. constant - nets made only of literal bits get a $constant
3. slice   - nets that are a contiguous sub-range of one driven port get a
             $busslice reading that whole port

Group runs interned by pass 1 are resolved by passes 2 and 3.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Union

from ..core.errors import SliceSourceError
from ..core.graph import Device, DeviceType, Polarity, SliceSpec, net_key_label
from ..core.ir import CONST_HIGH, NetKey, is_constant_bit
from .context import BitDriver, CompileContext

logger = logging.getLogger(__name__)


class BitClass(Enum):
    CONSTANT = "constant"
    UNRESOLVED = "unresolved"


BitOrigin = Union[BitDriver, BitClass]


def bit_origin(ctx: CompileContext, bit: int) -> BitOrigin:
    driver = ctx.bit_drivers.get(bit)
    if driver is not None:
        return driver
    if is_constant_bit(bit):
        return BitClass.CONSTANT
    return BitClass.UNRESOLVED


def continues_run(prev: BitOrigin, cur: BitOrigin) -> bool:
    if isinstance(prev, BitDriver) and isinstance(cur, BitDriver):
        return (
            cur.device_id == prev.device_id
            and cur.port == prev.port
            and cur.position == prev.position + 1
        )
    return prev is cur


def split_runs(ctx: CompileContext, key: NetKey) -> List[NetKey]:
    runs: List[List[int]] = []
    prev: Optional[BitOrigin] = None
    for bit in key:
        origin = bit_origin(ctx, bit)
        if not runs or not continues_run(prev, origin):
            runs.append([])
        runs[-1].append(bit)
        prev = origin
    return [tuple(run) for run in runs]


def add_bus_groups(ctx: CompileContext) -> int:
    added = 0
    for key, net in ctx.nets.snapshot():
        if net.driver is not None:
            continue
        runs = split_runs(ctx, key)
        if len(runs) <= 1:
            continue

        device_id = ctx.new_device_id()
        ctx.add_source(key, device_id, "out")
        for index, run in enumerate(runs):
            ctx.add_target(run, device_id, f"in{index}")
        ctx.add_device(
            Device(
                device_id=device_id,
                type=DeviceType.BUS_GROUP,
                bits=len(key),
                groups=tuple(len(run) for run in runs),
            )
        )
        added += 1
    return added


def add_constants(ctx: CompileContext) -> int:
    added = 0
    for key, net in ctx.nets.snapshot():
        if net.driver is not None:
            continue
        if not key or not all(is_constant_bit(bit) for bit in key):
            continue

        device_id = ctx.new_device_id()
        ctx.add_source(key, device_id, "out")
        ctx.add_device(
            Device(
                device_id=device_id,
                type=DeviceType.CONSTANT,
                bits=len(key),
                constant=tuple(Polarity.HIGH if bit == CONST_HIGH else Polarity.LOW for bit in key),
            )
        )
        added += 1
    return added


def add_bus_slices(ctx: CompileContext) -> int:
    added = 0
    for key, net in ctx.nets.snapshot():
        if net.driver is not None or not key:
            continue

        drivers = [ctx.bit_drivers.get(bit) for bit in key]
        if any(d is None for d in drivers):
            # left for the undriven-net diagnostic
            continue

        first = drivers[0]
        sources = sorted({(d.device_id, d.port) for d in drivers})
        if len(sources) > 1:
            raise SliceSourceError(ctx.module_name, key, sources)

        source_key = ctx.device_ports[first.device_id][first.port]
        device_id = ctx.new_device_id()
        ctx.add_source(key, device_id, "out")
        ctx.add_target(source_key, device_id, "in")
        ctx.add_device(
            Device(
                device_id=device_id,
                type=DeviceType.BUS_SLICE,
                bits=len(key),
                slice_spec=SliceSpec(first=first.position, count=len(key), total=len(source_key)),
            )
        )
        logger.debug(
            f"{ctx.module_name}: slice {net_key_label(key)} from "
            f"{first.device_id}.{first.port}[{first.position}:+{len(key)}]"
        )
        added += 1
    return added


def reconcile_buses(ctx: CompileContext) -> None:
    groups = add_bus_groups(ctx)
    constants = add_constants(ctx)
    slices = add_bus_slices(ctx)
    logger.info(
        f"Module {ctx.module_name}: {groups} bus group(s), {constants} constant(s), {slices} bus slice(s)"
    )
