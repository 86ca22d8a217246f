import re

import pytest

from hpckit.demos import (
    conflicts,
    copy_private,
    hello_threads,
    main,
    master_region,
    sections_region,
    single_region,
    taskgroup_order,
    taskwait_order,
)


def test_hello_threads_greets_once_per_thread():
    assert hello_threads(4) == ["Hello World."] * 4


def test_conflicts_hands_out_each_number_once():
    lines = conflicts(5)
    numbers = sorted(
        int(re.fullmatch(r"I think the number is (\d+)\.", line).group(1))
        for line in lines
    )
    assert numbers == [1, 2, 3, 4, 5]


def test_master_region_runs_master_line_once():
    lines = master_region(3)
    assert lines.count("Only once.") == 1
    assert lines.count("In parallel.") == 3
    assert lines.count("More in parallel.") == 3


def test_single_region_barrier_orders_lines():
    lines = single_region(4)
    assert lines.count("Only once.") == 1
    once = lines.index("Only once.")
    more = [i for i, line in enumerate(lines) if line == "More in parallel."]
    assert len(more) == 4
    assert all(i > once for i in more)


@pytest.mark.parametrize("count", [1, 2, 5])
def test_sections_each_run_once(count):
    lines = sections_region(count)
    assert lines.count("Everyone!") == count
    for section in ("Only me!", "No one else!", "Just me!"):
        assert lines.count(section) == 1


def test_copy_private_broadcasts_values():
    lines = copy_private(3)
    assert lines[0] == "call CopyPrivate from a single thread"
    assert lines[1] == "Value = 1.001000, thread = 0"
    assert lines[5] == "call CopyPrivate from a parallel region"
    serial = [float(line.split()[2].rstrip(",")) for line in lines[1:5]]
    assert serial == sorted(serial)
    assert len(set(serial)) == 4
    parallel = lines[6:]
    assert len(parallel) == 12
    values = [float(line.split()[2].rstrip(",")) for line in parallel]
    assert len(set(values)) == 4
    assert all(values.count(v) == 3 for v in set(values))
    assert min(values) > max(serial)
    threads = {line.rsplit("= ", 1)[1] for line in parallel}
    assert threads == {"0", "1", "2"}


def test_taskwait_child_before_parent():
    lines = taskwait_order()
    assert sorted(lines) == sorted(["Hello.", "Hi.", "Hej.", "Goodbye."])
    assert lines.index("Hello.") < lines.index("Hi.")
    assert lines[-1] == "Goodbye."


def test_taskgroup_waits_for_descendants():
    lines = taskgroup_order()
    assert sorted(lines[:2]) == ["Hello.", "Hi."]
    assert lines[-1] == "Goodbye."
    assert len(lines) == 3


@pytest.mark.parametrize(
    "func", [hello_threads, conflicts, master_region, single_region,
             sections_region, copy_private]
)
def test_non_positive_count_raises(func):
    with pytest.raises(ValueError):
        func(0)


def test_main_hello(capsys):
    assert main(["hello"]) == 0
    assert capsys.readouterr().out.splitlines() == ["Hello World."] * 4


def test_main_unknown_demo(capsys):
    assert main(["bogus"]) == 1
    assert capsys.readouterr().out.startswith("usage:")


def test_main_taskwait_rejects_count(capsys):
    assert main(["taskwait", "3"]) == 1
    assert "usage" in capsys.readouterr().out