import pytest

from chesscore.timeman import Limits, TimeManagement

WHITE, BLACK = 0, 1


def _managed(limits, ply=0, **kwargs):
    tm = TimeManagement()
    tm.init(limits, WHITE, ply, **kwargs)
    return tm


def test_sudden_death_example():
    tm = _managed(Limits(time=[10000, 10000]))
    assert tm.optimum() == 148
    assert tm.maximum() == 592


@pytest.mark.parametrize("ply", [0, 10, 40, 120])
@pytest.mark.parametrize("remaining", [1000, 60000, 300000])
def test_maximum_never_exceeds_eighty_percent(ply, remaining):
    tm = _managed(Limits(time=[remaining, remaining], inc=[100, 100]), ply=ply)
    assert tm.maximum() <= 0.8 * remaining - 10
    assert 0 < tm.optimum()


@pytest.mark.parametrize("movestogo", [1, 10, 40, 80])
def test_moves_to_go_bounds(movestogo):
    limits = Limits(time=[60000, 60000], movestogo=movestogo)
    tm = _managed(limits, ply=20)
    assert 0 < tm.optimum() <= 0.8 * 60000
    assert tm.maximum() <= 6.3 * tm.optimum()


def test_more_time_gives_more_optimum():
    short = _managed(Limits(time=[5000, 5000]), ply=30)
    long = _managed(Limits(time=[50000, 50000]), ply=30)
    assert long.optimum() > short.optimum()
    assert long.maximum() > short.maximum()


def test_slow_mover_scales_time_up():
    normal = _managed(Limits(time=[60000, 60000]), slow_mover=100)
    slow = _managed(Limits(time=[60000, 60000]), slow_mover=200)
    assert slow.optimum() > normal.optimum()


def test_ponder_adds_a_quarter():
    plain = _managed(Limits(time=[60000, 60000]))
    pondering = _managed(Limits(time=[60000, 60000]), ponder=True)
    assert pondering.optimum() == plain.optimum() + plain.optimum() // 4
    assert pondering.maximum() == plain.maximum()


def test_uses_time_of_side_to_move():
    limits = Limits(time=[1000, 100000])
    tm = TimeManagement()
    tm.init(limits, BLACK, 0)
    white = _managed(Limits(time=[1000, 100000]))
    assert tm.optimum() > white.optimum()


def test_nodes_as_time_converts_once():
    limits = Limits(time=[1000, 1000], inc=[10, 10])
    tm = TimeManagement()
    tm.init(limits, WHITE, 0, nodestime=5)
    assert tm.available_nodes == 5 * 1000
    assert limits.time[WHITE] == tm.available_nodes
    assert limits.inc[WHITE] == 5 * 10
    assert limits.npmsec == 5

    later = Limits(time=[400, 400])
    tm.init(later, WHITE, 10, nodestime=5)
    assert later.time[WHITE] == 5 * 1000


def test_elapsed_counts_nodes_in_nodes_mode():
    tm = TimeManagement()
    tm.init(Limits(time=[1000, 1000]), WHITE, 0, nodestime=2)
    assert tm.elapsed(nodes_searched=12345, now=999999) == 12345


def test_elapsed_measures_clock_time():
    tm = TimeManagement()
    tm.init(Limits(time=[1000, 1000], start_time=100), WHITE, 0)
    assert tm.elapsed(nodes_searched=777, now=350) == 350 - 100