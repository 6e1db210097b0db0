import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    run_algorithm,
    run_all,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from schedsim.models import Process


def _make(*rows):
    """Build processes from (id, burst, arrival[, priority]) tuples."""
    return [
        Process(pid=r[0], burst_time=r[1], arrival_time=r[2], priority=r[3] if len(r) > 3 else 0)
        for r in rows
    ]


def _procs():
    return _make((1, 5, 0, 2), (2, 3, 1, 1), (3, 8, 2, 3))


def _slices(res):
    return [(s.pid, s.start_time, s.end_time) for s in res.timeline]


DATASETS = [
    _make((1, 5, 0, 2), (2, 9, 1, 3), (3, 6, 3, 1), (4, 3, 4, 2), (5, 2, 10, 0)),
    _make((1, 6, 2), (2, 8, 0), (3, 7, 4), (4, 3, 5)),
    _make((1, 2, 3), (2, 2, 0), (3, 4, 0)),
    _make((1, 2, 0), (2, 3, 6), (3, 1, 6, 1)),
    _make((7, 1, 0, 5), (3, 4, 0, 5), (9, 2, 1, 4), (4, 6, 2, 0)),
]


def _assert_invariants(res, procs):
    for p in procs:
        assert sum(s.duration for s in res.timeline if s.pid == p.pid) == p.burst_time

    assert all(s.end_time > s.start_time for s in res.timeline)
    for a, b in zip(res.timeline, res.timeline[1:]):
        assert a.end_time <= b.start_time

    assert sorted(m.pid for m in res.processes) == sorted(p.pid for p in procs)
    for m in res.processes:
        assert m.turnaround_time == m.completion_time - m.arrival_time
        assert m.waiting_time == m.completion_time - m.arrival_time - m.burst_time
        assert m.waiting_time >= 0
        last = max(s.end_time for s in res.timeline if s.pid == m.pid)
        assert last == m.completion_time

    completions = [m.completion_time for m in res.processes]
    assert completions == sorted(completions)


def _assert_no_idle_while_waiting(res, procs):
    """The CPU only idles when no arrived process is unfinished."""
    completion = {m.pid: m.completion_time for m in res.processes}
    busy_until = 0
    for s in res.timeline:
        for t in range(busy_until, s.start_time):
            assert not any(p.arrival_time <= t < completion[p.pid] for p in procs)
        busy_until = s.end_time


def _unfinished_at(t, procs, completion):
    return [p for p in procs if p.arrival_time <= t < completion[p.pid]]


def _assert_sjf_choices(res, procs):
    """Every job starts when it is the shortest arrived, unfinished job."""
    completion = {m.pid: m.completion_time for m in res.processes}
    order = {p.pid: i for i, p in enumerate(procs)}
    burst = {p.pid: p.burst_time for p in procs}

    assert len(res.timeline) == len(procs)
    for s in res.timeline:
        candidates = _unfinished_at(s.start_time, procs, completion)
        best = min(candidates, key=lambda p: (p.burst_time, order[p.pid]))
        assert s.pid == best.pid
        assert s.duration == burst[s.pid]


def _assert_priority_choices(res, procs):
    """
    At every tick the running process is at least as urgent as every other
    arrived, unfinished process, so a more urgent arrival takes over on the
    tick it arrives.
    """
    completion = {m.pid: m.completion_time for m in res.processes}
    priority = {p.pid: p.priority for p in procs}

    for s in res.timeline:
        for t in range(s.start_time, s.end_time):
            for p in _unfinished_at(t, procs, completion):
                assert priority[s.pid] <= p.priority

    running_at = {t: s.pid for s in res.timeline for t in range(s.start_time, s.end_time)}
    for p in procs:
        rivals = [
            q for q in procs
            if q is not p and q.arrival_time == p.arrival_time and q.priority <= p.priority
        ]
        if rivals:
            continue
        before = running_at.get(p.arrival_time - 1)
        if before is not None and before != p.pid and priority[before] > p.priority:
            assert running_at[p.arrival_time] == p.pid
            assert any(s.pid == p.pid and s.start_time == p.arrival_time for s in res.timeline)


@pytest.mark.parametrize("procs", DATASETS)
def test_sjf_picks_shortest_available(procs):
    _assert_sjf_choices(schedule_sjf(procs), procs)


@pytest.mark.parametrize("procs", DATASETS)
def test_priority_runs_most_urgent(procs):
    _assert_priority_choices(schedule_priority(procs), procs)


@pytest.mark.parametrize("name", list(ALGORITHMS))
@pytest.mark.parametrize("procs", DATASETS)
def test_invariants_hold(name, procs):
    res = run_algorithm(name, procs, quantum=2)
    _assert_invariants(res, procs)
    if name != "fcfs":
        _assert_no_idle_while_waiting(res, procs)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_single_process(name):
    res = run_algorithm(name, _make((1, 5, 0)))
    assert _slices(res) == [(1, 0, 5)]
    m = res.processes[0]
    assert (m.waiting_time, m.turnaround_time, m.completion_time) == (0, 5, 5)
    assert res.summary.throughput == pytest.approx(1 / 5)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_empty_workload(name):
    res = run_algorithm(name, [])
    assert res.timeline == []
    assert res.processes == []
    assert res.summary.avg_waiting == 0.0
    assert res.summary.avg_turnaround == 0.0
    assert res.summary.throughput == 0.0


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]
    assert res.processes[0].waiting_time == 0
    assert res.processes[1].waiting_time == 4
    assert res.processes[2].waiting_time == 6


def test_fcfs_same_arrival():
    res = schedule_fcfs(_make((1, 5, 0), (2, 3, 0), (3, 1, 0)))
    assert _slices(res) == [(1, 0, 5), (2, 5, 8), (3, 8, 9)]
    assert [m.waiting_time for m in res.processes] == [0, 5, 8]
    assert [m.turnaround_time for m in res.processes] == [5, 8, 9]


def test_fcfs_keeps_input_order_over_arrival():
    res = schedule_fcfs(_make((1, 2, 3), (2, 2, 0)))
    assert _slices(res) == [(1, 3, 5), (2, 5, 7)]
    assert [m.pid for m in res.processes] == [1, 2]
    assert res.processes[1].waiting_time == 5


def test_fcfs_idles_until_arrival():
    res = schedule_fcfs(_make((1, 2, 0), (2, 3, 5)))
    assert _slices(res) == [(1, 0, 2), (2, 5, 8)]
    assert res.processes[1].waiting_time == 0


def test_sjf_order():
    res = schedule_sjf(_procs())
    # P1 is alone at t=0, then P2 < P3 once P1 completes
    assert [s.pid for s in res.timeline] == [1, 2, 3]


def test_sjf_classic_dataset():
    res = schedule_sjf(_make((1, 6, 2), (2, 8, 0), (3, 7, 4), (4, 3, 5)))
    assert _slices(res) == [(2, 0, 8), (4, 8, 11), (1, 11, 17), (3, 17, 24)]
    assert [m.pid for m in res.processes] == [2, 4, 1, 3]
    assert {m.pid: m.waiting_time for m in res.processes} == {2: 0, 4: 3, 1: 9, 3: 13}
    assert res.summary.avg_waiting == pytest.approx(6.25)
    assert res.summary.avg_turnaround == pytest.approx(12.25)
    assert res.summary.throughput == pytest.approx(4 / 24)


def test_sjf_is_not_preempted_by_shorter_arrival():
    res = schedule_sjf(_make((1, 8, 0), (2, 1, 1)))
    assert _slices(res) == [(1, 0, 8), (2, 8, 9)]


def test_sjf_ties_follow_input_order_not_pid():
    res = schedule_sjf(_make((9, 3, 0), (2, 3, 0)))
    assert [s.pid for s in res.timeline] == [9, 2]


def test_sjf_waits_for_first_arrival():
    res = schedule_sjf(_make((1, 3, 2)))
    assert _slices(res) == [(1, 2, 5)]
    assert res.processes[0].waiting_time == 0


def test_priority_preempts_on_arrival():
    res = schedule_priority(_procs())
    # P2 (priority 1) arrives at t=1 and takes the CPU from P1 (priority 2)
    assert res.timeline[0].pid == 1
    assert _slices(res)[1] == (2, 1, 4)
    assert [s.pid for s in res.timeline] == [1, 2, 1, 3]


def test_priority_preemption_at_exact_arrival_tick():
    res = schedule_priority(_make((1, 5, 0, 3), (2, 3, 2, 1), (3, 2, 3, 2)))
    assert _slices(res) == [(1, 0, 2), (2, 2, 5), (3, 5, 7), (1, 7, 10)]
    assert [m.pid for m in res.processes] == [2, 3, 1]
    assert {m.pid: m.waiting_time for m in res.processes} == {2: 0, 3: 2, 1: 5}


def test_priority_equal_value_does_not_preempt():
    res = schedule_priority(_make((1, 4, 0, 1), (2, 2, 1, 1)))
    assert _slices(res) == [(1, 0, 4), (2, 4, 6)]


def test_priority_ties_follow_input_order():
    res = schedule_priority(_make((5, 2, 0, 1), (3, 2, 0, 1)))
    assert _slices(res) == [(5, 0, 2), (3, 2, 4)]


def test_rr_quantum_2():
    res = schedule_rr(_procs(), quantum=2)
    assert _slices(res) == [
        (1, 0, 2),
        (2, 2, 4),
        (3, 4, 6),
        (1, 6, 8),
        (2, 8, 9),
        (3, 9, 11),
        (1, 11, 12),
        (3, 12, 16),
    ]
    assert res.summary.cpu_busy_time == sum(p.burst_time for p in _procs())


def test_rr_two_processes():
    res = schedule_rr(_make((1, 4, 0), (2, 3, 1)))
    assert res.quantum == 2
    assert _slices(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 6), (2, 6, 7)]


def test_rr_wraps_around_and_retires_finished():
    res = schedule_rr(_make((1, 5, 0), (2, 3, 0), (3, 1, 0)), quantum=2)
    assert _slices(res) == [(1, 0, 2), (2, 2, 4), (3, 4, 5), (1, 5, 7), (2, 7, 8), (1, 8, 9)]
    assert [m.pid for m in res.processes] == [3, 2, 1]
    assert [m.waiting_time for m in res.processes] == [4, 5, 4]


def test_rr_completion_on_quantum_boundary():
    res = schedule_rr(_make((1, 2, 0), (2, 2, 0)))
    assert _slices(res) == [(1, 0, 2), (2, 2, 4)]
    assert res.processes[0].completion_time == 2


def test_rr_sole_process_keeps_cpu():
    res = schedule_rr(_make((1, 6, 0), (2, 1, 10)))
    assert _slices(res) == [(1, 0, 6), (2, 10, 11)]


def test_rr_custom_quantum():
    res = schedule_rr(_make((1, 4, 0), (2, 3, 1)), quantum=3)
    assert _slices(res) == [(1, 0, 3), (2, 3, 6), (1, 6, 7)]


@pytest.mark.parametrize("procs", DATASETS)
def test_rr_bounded_by_quantum(procs):
    quantum = 2
    res = schedule_rr(procs, quantum=quantum)
    completion = {m.pid: m.completion_time for m in res.processes}
    for s in res.timeline:
        for t in range(s.start_time + quantum, s.end_time, quantum):
            others = [p for p in procs if p.pid != s.pid and p.arrival_time <= t < completion[p.pid]]
            assert others == []


def test_rr_rejects_non_positive_quantum():
    with pytest.raises(ValueError):
        schedule_rr(_procs(), quantum=0)


def test_run_algorithm_unknown():
    with pytest.raises(ValueError):
        run_algorithm("srtf", _procs())


def test_run_all_fixed_order_and_input_untouched():
    procs = _procs()
    snapshot = list(procs)
    results = run_all(procs)
    assert [r.algorithm for r in results] == ["fcfs", "sjf", "priority", "rr"]
    assert [r.title for r in results] == ["First-come, first-serve", "Shortest-job-first", "Priority", "Round-robin"]
    assert procs == snapshot
