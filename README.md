# chesscore

Building blocks for the engine side of a UCI chess program, in plain Python
with no third-party dependencies.

## What is inside

| Module | Purpose |
| --- | --- |
| `chesscore.options` | UCI options: `Option`, `OptionType`, the case-insensitive `OptionsMap`, `default_options()`, `case_insensitive_less()` |
| `chesscore.uci` | Protocol helpers: `parse_setoption`, `apply_setoption`, `parse_go`, `format_value`, `format_wdl`, `win_rate_model`, `square_name` |
| `chesscore.timeman` | `Limits` and `TimeManagement`: optimum and maximum thinking time for a move |
| `chesscore.tt` | `TranspositionTable`, `TTEntry` and `Bound`: a clustered hash table with generation-based ageing |
| `chesscore.tune` | `Tune`, `SetRange`, `Param`, `ScoreParam`, `default_range`, `next_name`: exposing parameters as spin options for tuning sessions |
| `chesscore.threads` | `Worker` and `ThreadPool`: parked search threads, node counting and best-thread voting (`pick_best`) |
| `chesscore.tbfiles` | Locating and validating `.rtbw` / `.rtbz` tablebase files, and the `TableHash` lookup |

## Options

Options are looked up case-insensitively and are printed in the order they
were added, in the form the `uci` command expects.

```python
from chesscore.options import Option, OptionsMap

options = OptionsMap()
options.add("Threads", Option.spin(1, 1, 512, on_change=None))
options.add("Ponder", Option.check(False, on_change=None))

options["threads"].set("4")      # names are case-insensitive
int(options["Threads"])          # 4
options["Threads"].set("9999")   # out of range: ignored
bool(options["Ponder"])          # False

print(options.format_uci())
```

Values that are empty, not `true`/`false` for a check, out of range for a
spin, or not among a combo's choices are ignored. When a value is accepted,
the option's `on_change` callback is run with the option.

`default_options(eval_file, handlers)` builds the usual set of engine options
(`Threads`, `Hash`, `Ponder`, `MultiPV`, `Move Overhead`, `SyzygyPath`,
`EvalFile` and the rest), where `handlers` maps option names to the callbacks
run when those options change.

## Protocol helpers

```python
from chesscore.uci import apply_setoption, parse_go, square_name

apply_setoption(options, "name Threads value 2")   # KeyError for unknown names
limits = parse_go("wtime 60000 btime 60000 movestogo 40", to_move=str)
limits.time, limits.movestogo                      # [60000, 60000], 40
square_name(0)                                     # "a1"
```

`format_value` turns an internal score into `cp <x>` or `mate <y>`, and
`format_wdl` gives the ` wdl <w> <d> <l>` statistics derived from
`win_rate_model`.

## Time management

`TimeManagement.init(limits, us, ply, move_overhead, slow_mover, nodestime,
ponder)` takes the `Limits` of a `go` command and the side to move, then
reports `optimum()` and `maximum()` in milliseconds. With `nodestime` set,
time is counted in nodes and `elapsed()` returns the nodes searched.

## Transposition table

```python
from chesscore.tt import Bound, TranspositionTable

table = TranspositionTable(16, -7)   # 16 MB, depth offset of the engine
table.new_search()
found, entry = table.probe(0x1234ABCD)
table.save(entry, 0x1234ABCD, 35, False, Bound.EXACT, 10, 0, 30)
table.hashfull()                     # per-mille occupancy for the current generation
```

`probe(key)` returns whether the position was found, together with its entry
or the least valuable entry in its cluster to overwrite.

## Tuning

```python
from chesscore.tune import Param, ScoreParam, Tune

bonus, weights = Param(40), [Param(10), Param(20)]
tune = Tune()
tune.add("(bonus, weights)", bonus, weights)
tune.init()   # creates spin options bonus, weights[0], weights[1] and prints them
```

Each option line printed by `init()` has the form
`name,value,min,max,step,0.0020`. Changing an option copies its value back
into the parameter.

## Threads

`ThreadPool(search)` owns `Worker` threads that sleep until started and then
call `search(worker)`. `set(n)` recreates the workers, `main()` is the first
one, `nodes_searched()` and `tb_hits()` sum the workers' counters, and
`get_best_thread(tb_win, tb_loss)` votes among workers whose `root_moves`
items carry a `score` and a `pv`. The pool and its workers are context
managers that join their threads on exit.

## Tablebase files

`find_table_file(paths, name)` looks for a file along a separator-delimited
list of directories, `read_table_file(path, TableType.WDL)` checks the size
and magic header (raising `CorruptTableError`) and returns the body, and
`table_file_name` builds names such as `KRvK.rtbw`. `TableHash` maps material
keys to pairs of tables.

## What this package does not do

It has no board, move generation, search or evaluation: callers supply their
own search function and move parser. There is no command loop reading UCI
commands from standard input, and no command-line program. Tablebase files can
be found and validated, but their contents are not decoded or probed for
win/draw/loss or distance-to-zero values.