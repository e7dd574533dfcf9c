# cbnsim

A collection of small simulations of natural computation: one-dimensional
maps, the Henon system, cellular automata, diffusion-limited aggregation,
flocking, the Prisoner's Dilemma, genetic algorithms and neural networks.
Each one is a command-line program and also a set of plain Python
functions and classes. The package has no third-party dependencies.

## Installation

```
pip install .
```

To install with the test requirements and run the tests:

```
pip install .[test]
pytest
```

## Commands

| Command          | What it does                                                       |
|------------------|--------------------------------------------------------------------|
| `cbn-gen1d`      | Prints a time series from a one-dimensional map                    |
| `cbn-bifur1d`    | Draws a bifurcation diagram of a one-dimensional map               |
| `cbn-henon`      | Draws, or with `-data` prints, the phase space of the Henon system |
| `cbn-henwarp`    | Warps a square through repeated Henon steps                        |
| `cbn-henbif`     | Draws a bifurcation diagram of the Henon system in A or B          |
| `cbn-hencon`     | Prints a run of the Henon system under OGY control                 |
| `cbn-ca`         | Draws a one-dimensional cellular automaton, with lambda rules      |
| `cbn-diffuse`    | Grows a diffusion-limited aggregate                                |
| `cbn-boids`      | Simulates a flock of boids and draws the final configuration       |
| `cbn-eipd`       | Prints population shares in the ecological iterated PD             |
| `cbn-gastring`   | Breeds strings towards a target with a genetic algorithm           |
| `cbn-gabump`     | Finds the peak of a one-dimensional bump with a GA                 |
| `cbn-gasurf`     | Finds the peak of a two-dimensional surface with a GA              |
| `cbn-gaipd`      | Breeds iterated Prisoner's Dilemma strategies with a GA            |
| `cbn-hopfield`   | Solves a task-assignment problem with a Hopfield network           |
| `cbn-gatask`     | Solves a task-assignment problem with a GA                         |
| `cbn-assoc`      | Recalls stored PBM patterns from an associative memory             |

For example, to print ten iterates of the logistic map:

```
cbn-gen1d -points 10 -r 1.0
```

Options are written with a single dash (`-width 320`, `-seed 7`) and
follow the parameter names of the simulation; `-h` lists them for each
command. Where a command has a `-seed` option, a run can be repeated
exactly. Switches such as `-wrap`, `-sq` (for `cbn-ca`), `-swap` (for
`cbn-henon` and `cbn-henwarp`) and `-ab` (for `cbn-henbif`) are on by
default and giving them turns them off.

### Images

The drawing commands write a binary PGM image. `-term FILE` names the
output file; without it, or with `-term -`, the image goes to standard
output. `-mag N` enlarges each pixel to N x N and `-inv` inverts the
grey levels (level 0 is white by default).

### Input files

- `cbn-hopfield` and `cbn-gatask` read a specification file given with
  `-specs` (default `data/hop1.dat`): a size n followed by n*n numbers,
  with `#` starting a comment.
- `cbn-assoc` stores one or more patterns given with repeated `-pfile`
  options and recalls from the pattern given with `-tfile` (default
  `data/a.pbm`). Files must be plain (P1) or raw (P4) PBM images of the
  same size.

No such data files are shipped with the package; supply your own.

## Library use

```python
from cbnsim.maps import get_map, time_series

logistic = get_map("log", 1.0)
series = time_series(logistic, 1.0, 0.123456, 10, 0)
```

The map names are `log`, `tent`, `sin` and `gauss`. The other modules
offer:

- `cbnsim.raster`: `Canvas` (plot, line, box, fill, get, `to_pgm`, save)
- `cbnsim.bifur1d`, `cbnsim.henbif`: `bifurcation_points`
- `cbnsim.henon`: `henon_step`, `orbit`, `viewport_right`
- `cbnsim.henwarp`: `warp_square`
- `cbnsim.hencon`: `control_law`, `simulate`, `ControlSample`
- `cbnsim.ca`: `lambda_table`, `rule_lambda`, `random_rule`, `initial_row`, `evolve`
- `cbnsim.diffuse`: `Aggregate`, `near_another`
- `cbnsim.boids`: `Flock`, `FlockParams`, `normalize`
- `cbnsim.eipd`: `Strategy`, `Payoffs`, `play`, `ecology`
- `cbnsim.genetic`: `roulette_select`, `crossover`
- `cbnsim.gastring`: `evolve`, `string_fitness`, `random_letter_or_space`, `GenerationStats`
- `cbnsim.gabump`: `evolve`, `bump`, `decode`
- `cbnsim.gasurf`: `evolve`, `surface`, `decode`
- `cbnsim.gaipd`: `IPDGA`, `dna_offsets`, `format_strategy`
- `cbnsim.hopfield`: `HopfieldNetwork`, `sigmoid`, `read_specs`
- `cbnsim.gatask`: `read_specs`, `random_solution`, `task_cost`, `task_crossover`, `evolve`
- `cbnsim.assoc`: `AssociativeMemory`, `read_pbm`

Functions that use randomness take an `rng` argument, a
`random.Random` instance, so results can be reproduced. Simulations
that run over time are generators or objects with a `step` method, so
you can stop them when you like.

## What it does not do

There is no on-screen display or animation. The drawing commands build
the whole picture in memory and write one PGM image when the run ends:
`cbn-boids` draws only the final positions of the flock, `cbn-diffuse`
the final aggregate, and `cbn-hopfield` the final activations. Other
image formats, such as PostScript, are not produced.