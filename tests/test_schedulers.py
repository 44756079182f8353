import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    compare_algorithms,
    response_ratio,
    run_algorithm,
    schedule_fcfs,
    schedule_hrrn,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
    schedule_srtf,
)
from schedsim.models import Process, ValidationError, make_processes


def _procs():
    return make_processes(
        bursts=[5, 3, 8, 2],
        arrivals=[0, 1, 2, 9],
        priorities=[2, 1, 3, 1],
    )


def _spans(result):
    return [(s.pid, s.start_time, s.end_time) for s in result.timeline]


def test_fcfs_waiting_times():
    res = schedule_fcfs(make_processes([5, 3, 8]))
    assert res.waiting_times == [0, 5, 8]
    assert res.end_time == 16
    assert res.metrics.average_waiting_time == pytest.approx(4.333, abs=1e-3)
    assert [s.pid for s in res.timeline] == [0, 1, 2]


def test_fcfs_treats_arrivals_as_simultaneous():
    procs = make_processes([5, 3], arrivals=[2, 0])
    res = schedule_fcfs(procs)
    assert res.waiting_times == [0, 5]
    assert [p.arrival_time for p in res.processes] == [0, 0]
    # Caller's records are left alone.
    assert procs[0].arrival_time == 2


def test_sjf_order():
    res = schedule_sjf(make_processes([6, 8, 7, 3]))
    assert res.waiting_times == [3, 16, 9, 0]
    assert [s.pid for s in res.timeline] == [3, 0, 2, 1]
    assert res.end_time == 24


def test_sjf_ties_keep_input_order():
    res = schedule_sjf(make_processes([4, 2, 4, 2]))
    assert [s.pid for s in res.timeline] == [1, 3, 0, 2]
    assert res.waiting_times == [4, 0, 8, 2]


def test_priority_static():
    res = schedule_priority(make_processes([10, 1, 2, 1, 5], priorities=[3, 1, 4, 5, 2]))
    assert [s.pid for s in res.timeline] == [1, 4, 0, 2, 3]
    assert res.waiting_times == [6, 0, 16, 18, 1]
    assert res.end_time == 19


def test_priority_ties_keep_input_order():
    res = schedule_priority(make_processes([2, 3, 4], priorities=[1, 1, 0]))
    assert [s.pid for s in res.timeline] == [2, 0, 1]
    assert res.waiting_times == [4, 6, 0]


def test_priority_requires_priorities():
    with pytest.raises(ValidationError):
        schedule_priority(make_processes([2, 3]))


def test_rr_quantum_4():
    res = schedule_rr(make_processes([5, 3, 8]), quantum=4)
    assert res.end_time == 16
    assert res.waiting_times == [7, 4, 8]
    assert _spans(res) == [(0, 0, 4), (1, 4, 7), (2, 7, 11), (0, 11, 12), (2, 12, 16)]
    assert res.quantum == 4


def test_rr_idle_gap_advances_one_unit():
    res = schedule_rr(make_processes([2, 1], arrivals=[0, 5]), quantum=2)
    assert res.waiting_times == [0, 0]
    assert res.end_time == 6
    assert _spans(res) == [(0, 0, 2), (1, 5, 6)]
    assert res.metrics.cpu_utilization == pytest.approx(50.0)


def test_rr_picks_up_arrivals_within_a_scan():
    res = schedule_rr(make_processes([2, 2], arrivals=[0, 1]), quantum=1)
    # P2 becomes eligible at t=1, while the first scan is still running.
    assert _spans(res) == [(0, 0, 1), (1, 1, 2), (0, 2, 3), (1, 3, 4)]
    assert res.waiting_times == [1, 1]


@pytest.mark.parametrize("quantum", [None, 0, -1, float("nan")])
def test_rr_rejects_bad_quantum(quantum):
    with pytest.raises(ValidationError):
        schedule_rr(make_processes([1, 2]), quantum=quantum)


def test_rr_warns_on_fractional_inputs(caplog):
    res = schedule_rr(make_processes([1], arrivals=[0.5]), quantum=0.5)
    assert res.end_time == 1.5
    assert res.waiting_times == [0]
    assert "fractional" in caplog.text


def test_srtf_preempts_at_arrival():
    res = schedule_srtf(make_processes([8, 4, 9], arrivals=[0, 1, 2]))
    assert _spans(res) == [(0, 0, 1), (1, 1, 5), (0, 5, 12), (2, 12, 21)]
    assert res.waiting_times == [4, 0, 10]
    assert res.end_time == 21


def test_srtf_ties_go_to_lower_index():
    res = schedule_srtf(make_processes([3, 3]))
    assert _spans(res) == [(0, 0, 3), (1, 3, 6)]
    assert res.waiting_times == [0, 3]


def test_srtf_idle_until_arrival():
    res = schedule_srtf(make_processes([2, 1], arrivals=[0, 4]))
    assert _spans(res) == [(0, 0, 2), (1, 4, 5)]
    assert res.end_time == 5


def test_srtf_fractional_burst():
    procs = make_processes([2.5])
    res = schedule_srtf(procs)
    assert res.end_time == 2.5
    assert res.waiting_times == [0]
    assert _spans(res) == [(0, 0, 2.5)]


def test_hrrn_selection():
    res = schedule_hrrn(make_processes([3, 6, 4, 5, 2], arrivals=[0, 2, 4, 6, 8]))
    assert [s.pid for s in res.timeline] == [0, 1, 2, 4, 3]
    assert res.waiting_times == [0, 1, 5, 9, 5]
    assert res.end_time == 20


def test_hrrn_fast_forwards_idle_gap():
    res = schedule_hrrn(make_processes([2, 3], arrivals=[0, 10]))
    assert _spans(res) == [(0, 0, 2), (1, 10, 13)]
    assert res.waiting_times == [0, 0]


def test_hrrn_ties_go_to_lower_index():
    res = schedule_hrrn(make_processes([4, 4]))
    assert [s.pid for s in res.timeline] == [0, 1]


def test_response_ratio():
    assert response_ratio(5, 5, 3) == 1.0
    ratios = [response_ratio(t, 5, 3) for t in range(5, 11)]
    assert all(a < b for a, b in zip(ratios, ratios[1:]))
    assert response_ratio(0, 0, 0) == float("inf")


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_turnaround_is_waiting_plus_burst(name):
    procs = _procs()
    res = run_algorithm(name, procs, quantum=2)
    assert len(res.processes) == len(procs)
    assert sum(res.turnaround_times) == sum(res.waiting_times) + sum(p.burst_time for p in procs)
    assert all(w >= 0 for w in res.waiting_times)
    assert res.end_time >= max(p.arrival_time + p.burst_time for p in res.processes)
    assert sum(s.end_time - s.start_time for s in res.timeline) == sum(p.burst_time for p in procs)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_repeated_runs_are_identical(name):
    procs = _procs()
    first = run_algorithm(name, procs, quantum=2)
    second = run_algorithm(name, procs, quantum=2)
    assert first.waiting_times == second.waiting_times
    assert first.metrics == second.metrics
    assert [p.remaining_time for p in procs] == [p.burst_time for p in procs]


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_single_instant_workload(name):
    res = run_algorithm(name, [Process(pid=0, burst_time=0, priority=0)], quantum=1)
    assert res.end_time == res.start_time == 0
    assert res.metrics.span == 1
    assert res.metrics.cpu_utilization == 0
    assert res.metrics.throughput == 1
    assert res.timeline == []


def test_run_algorithm_dispatch():
    res = run_algorithm("FCFS", make_processes([1, 2]))
    assert res.algorithm == "FCFS"
    with pytest.raises(ValueError):
        run_algorithm("lottery", make_processes([1, 2]))


def test_compare_algorithms():
    results = compare_algorithms(_procs(), ["fcfs", "rr", "hrrn"], quantum=2)
    assert list(results) == ["fcfs", "rr", "hrrn"]
    assert results["rr"].quantum == 2
    assert results["fcfs"].quantum is None


def test_rr_fractional_waiting_never_negative():
    res = schedule_rr(make_processes([2.7], arrivals=[0.1]), quantum=0.1)
    assert res.waiting_times[0] >= 0
    assert res.waiting_times[0] == pytest.approx(0)


def test_srtf_fractional_waiting_never_negative():
    res = schedule_srtf(make_processes([2.9, 1.4], arrivals=[2.9, 0.7]))
    assert all(w >= 0 for w in res.waiting_times)
    assert res.waiting_times == pytest.approx([0.2, 0])


@pytest.mark.parametrize("name", ["rr", "srtf", "hrrn"])
@pytest.mark.parametrize(
    "bursts, arrivals",
    [
        ([2.7, 0.3, 1.1], [0.1, 0.2, 0.9]),
        ([0.7, 1.9, 2.3, 0.4], [1.3, 0.3, 0.0, 4.1]),
        ([3.3, 0.1], [0.6, 0.6]),
    ],
)
def test_fractional_workloads_keep_invariants(name, bursts, arrivals):
    res = run_algorithm(name, make_processes(bursts, arrivals=arrivals), quantum=0.3)
    assert all(w >= 0 for w in res.waiting_times)
    assert sum(res.turnaround_times) == pytest.approx(sum(res.waiting_times) + sum(bursts))


def test_rr_zero_burst_in_mixed_workload():
    res = schedule_rr(make_processes([3, 0, 2], arrivals=[0, 1, 0]), quantum=2)
    assert _spans(res) == [(0, 0, 2), (2, 2, 4), (0, 4, 5)]
    assert res.waiting_times == [2, 1, 2]
    assert res.end_time == 5


def test_srtf_zero_burst_in_mixed_workload():
    res = schedule_srtf(make_processes([3, 0], arrivals=[0, 1]))
    assert _spans(res) == [(0, 0, 3)]
    assert res.waiting_times == [0, 0]
    assert res.end_time == 3


def test_hrrn_zero_burst_goes_first():
    res = schedule_hrrn(make_processes([4, 0, 3]))
    assert _spans(res) == [(0, 0, 4), (2, 4, 7)]
    assert res.waiting_times == [0, 0, 4]
    assert res.end_time == 7
