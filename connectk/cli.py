"""CLI rendering, input helpers and commands for Connect-K."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import trange

from connectk.agents import Agent, HeuristicAgent, HumanAgent, MCTSAgent, RandomAgent
from connectk.board import Player
from connectk.game import Game, GameConfig, Move, State
from connectk.search import Cell

app = typer.Typer(no_args_is_help=True, help="Connect-K with a self-play MCTS opponent.")
console = Console()

AGENT_CHOICES = ("human", "random", "heuristic", "mcts")
TOKEN = "●"
COLORS = {Player.ONE: "red", Player.TWO: "green"}


def render_board(game: Game, *, last_move: Optional[Cell] = None) -> str:
    """Board as rich markup, top row first; winning cells and the last move are highlighted."""

    board = game.board()
    winner = game.winner()
    marked = set(winner.cells) if winner is not None else set()
    if last_move is not None:
        marked.add(last_move)

    sep = "-" + "----" * board.cols
    lines: List[str] = ["| " + " | ".join(str(c) for c in range(board.cols)) + " |"]
    for r in range(board.rows - 1, -1, -1):
        cells = []
        for c in range(board.cols):
            token = board.token_at(c, r)
            glyph = " " if token is None else f"[{COLORS[token]}]{TOKEN}[/]"
            if (c, r) in marked:
                glyph = f"[on yellow]{glyph}[/]"
            cells.append(glyph)
        lines.append(sep)
        lines.append("| " + " | ".join(cells) + " |")
    lines.append(sep)
    return "\n".join(lines)


def format_move_history(moves: Sequence[Move]) -> str:
    return " ".join(f"{m.ply}:P{int(m.player)}@({m.col},{m.row})" for m in moves)


def _parse_column(raw: str, width: int) -> Optional[int]:
    raw = raw.strip()
    if not raw:
        return None
    try:
        col = int(raw)
    except ValueError:
        return None

    if 0 <= col < width:
        return col
    if 1 <= col <= width:
        return col - 1
    return None


def _parse_moves(raw: str) -> List[int]:
    raw = raw.strip()
    if not raw:
        return []
    try:
        return [int(part) for part in raw.replace(" ", "").split(",") if part]
    except ValueError as exc:
        raise typer.BadParameter(f"moves must be comma-separated column indices: {raw!r}") from exc


def prompt_for_human_move(game: Game, name: str) -> int:
    legal = game.valid_moves()
    prompt = f"{name} ({game.current_player()}) to move. Columns {legal}"

    while True:
        raw = typer.prompt(prompt)
        col = _parse_column(raw, game.cols)
        if col is None:
            console.print("Enter a column index (0-based or 1-based).")
            continue
        if col not in legal:
            console.print("Illegal move: column full or out of range.")
            continue
        return col


def build_agent(kind: str, name: str, *, think_time: float, seed: Optional[int], progress: bool = False) -> Agent:
    if kind == "human":
        return HumanAgent(name, prompt_for_human_move)
    if kind == "random":
        return RandomAgent(f"Random {name}", seed=seed)
    if kind == "heuristic":
        return HeuristicAgent(f"Heuristic {name}", seed=seed)
    if kind == "mcts":
        return MCTSAgent(f"MCTS {name}", think_time=think_time, seed=seed, progress=progress)

    raise typer.BadParameter(f"unsupported agent choice: {kind} (expected one of {', '.join(AGENT_CHOICES)})")


def weights_table(agent: MCTSAgent, state: State, legal: Sequence[int]) -> Table:
    weights = agent.engine.move_weights(state, legal)
    stats = agent.engine.stats(state)
    table = Table(title=f"{agent.name} win-rates")
    table.add_column("col", justify="right")
    table.add_column("win-rate", justify="right")
    table.add_column("visits", justify="right")
    for col, w in zip(legal, weights):
        table.add_row(str(col), f"{float(w):.3f}", str(int(stats.visits[col])))
    return table


def play_game(game: Game, agents: Dict[Player, Agent], *, show_weights: bool = True) -> Game:
    last_move: Optional[Cell] = None

    while not game.over():
        console.print(render_board(game, last_move=last_move))
        agent = agents[game.current_player()]
        state = game.state()
        legal = game.valid_moves()

        col = agent.select_move(game)
        if isinstance(agent, MCTSAgent) and agent.last_result is not None:
            r = agent.last_result
            console.print(f"ran {r.rollouts} simulations; (w/l/t={r.wins}/{r.losses}/{r.ties})")
            if show_weights:
                console.print(weights_table(agent, state, legal))

        row = game.drop(col)
        last_move = (col, row)
        console.print(f"Move: {agent.name} -> col {col}, row {row}")
        console.print("")

    console.print(render_board(game))
    winner = game.winner()
    if winner is None:
        console.print("Result: draw")
    else:
        console.print(f"Result: {agents[winner.player].name} ({winner.player}) wins")
    if game.moves:
        console.print(f"Moves: {format_move_history(game.moves)}")
    return game


def _pick_seed(base: Optional[int], override: Optional[int], *, offset: int = 0) -> Optional[int]:
    if override is not None:
        return override
    if base is not None:
        return base + offset
    return None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _config(cols: int, rows: int, win_len: int) -> GameConfig:
    cfg = GameConfig(cols=cols, rows=rows, win_len=win_len)
    try:
        cfg.validate()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return cfg


@app.command()
def play(
    first: str = typer.Option("human", "--first", help=f"agent for Player 1: {'|'.join(AGENT_CHOICES)}"),
    second: str = typer.Option("mcts", "--second", help=f"agent for Player 2: {'|'.join(AGENT_CHOICES)}"),
    cols: int = typer.Option(7, help="board columns"),
    rows: int = typer.Option(6, help="board rows"),
    win_len: int = typer.Option(4, help="run length needed to win"),
    think_time: float = typer.Option(1.0, help="MCTS thinking time per move (seconds)"),
    seed: Optional[int] = typer.Option(None, help="base random seed"),
    seed_first: Optional[int] = typer.Option(None, help="seed for Player 1's agent"),
    seed_second: Optional[int] = typer.Option(None, help="seed for Player 2's agent"),
    show_weights: bool = typer.Option(True, help="print MCTS win-rates after each AI move"),
    progress: bool = typer.Option(False, "--progress", help="show a rollout counter while thinking"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="debug logging"),
) -> None:
    """Play one game on the terminal."""

    _configure_logging(verbose)
    cfg = _config(cols, rows, win_len)

    agents = {
        Player.ONE: build_agent(first, "P1", think_time=think_time, seed=_pick_seed(seed, seed_first, offset=0), progress=progress),
        Player.TWO: build_agent(second, "P2", think_time=think_time, seed=_pick_seed(seed, seed_second, offset=1), progress=progress),
    }
    play_game(Game.from_config(cfg), agents, show_weights=show_weights)


def run_match(
    cfg: GameConfig, first: Agent, second: Agent, *, games: int, show_progress: bool = True
) -> Dict[str, int]:
    """
    Play `games` games between two agents, alternating who starts.

    Results are reported from the first agent's perspective.
    """

    wins = draws = losses = 0
    for g in trange(games, desc="match", leave=False, disable=not show_progress):
        first_starts = g % 2 == 0
        seats = {Player.ONE: first, Player.TWO: second} if first_starts else {Player.ONE: second, Player.TWO: first}

        game = Game.from_config(cfg)
        while not game.over():
            game.drop(seats[game.current_player()].select_move(game))

        winner = game.winner()
        if winner is None:
            draws += 1
        elif seats[winner.player] is first:
            wins += 1
        else:
            losses += 1

    return {"wins": wins, "draws": draws, "losses": losses}


@app.command()
def match(
    first: str = typer.Option("mcts", "--first", help=f"first agent: {'|'.join(AGENT_CHOICES[1:])}"),
    second: str = typer.Option("heuristic", "--second", help=f"second agent: {'|'.join(AGENT_CHOICES[1:])}"),
    games: int = typer.Option(10, help="number of games (starts alternate)"),
    cols: int = typer.Option(7, help="board columns"),
    rows: int = typer.Option(6, help="board rows"),
    win_len: int = typer.Option(4, help="run length needed to win"),
    think_time: float = typer.Option(0.2, help="MCTS thinking time per move (seconds)"),
    seed: Optional[int] = typer.Option(None, help="base random seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="debug logging"),
) -> None:
    """Pit two non-human agents against each other."""

    _configure_logging(verbose)
    if "human" in (first, second):
        raise typer.BadParameter("match does not support human agents; use `play`")
    if games < 1:
        raise typer.BadParameter("games must be >= 1")
    cfg = _config(cols, rows, win_len)

    a = build_agent(first, "A", think_time=think_time, seed=_pick_seed(seed, None, offset=0))
    b = build_agent(second, "B", think_time=think_time, seed=_pick_seed(seed, None, offset=1))
    result = run_match(cfg, a, b, games=games)

    table = Table(title=f"{a.name} vs {b.name} ({cfg.cols}x{cfg.rows}, k={cfg.win_len})")
    table.add_column("games", justify="right")
    table.add_column("wins", justify="right")
    table.add_column("draws", justify="right")
    table.add_column("losses", justify="right")
    table.add_row(str(games), str(result["wins"]), str(result["draws"]), str(result["losses"]))
    console.print(table)


@app.command()
def analyze(
    moves: str = typer.Option("", help="comma-separated 0-based columns played so far, e.g. 3,3,4"),
    cols: int = typer.Option(7, help="board columns"),
    rows: int = typer.Option(6, help="board rows"),
    win_len: int = typer.Option(4, help="run length needed to win"),
    think_time: float = typer.Option(1.0, help="MCTS thinking time (seconds)"),
    seed: Optional[int] = typer.Option(None, help="random seed"),
    progress: bool = typer.Option(False, "--progress", help="show a rollout counter while thinking"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="debug logging"),
) -> None:
    """Replay a move sequence and print MCTS win-rates for the side to move."""

    _configure_logging(verbose)
    cfg = _config(cols, rows, win_len)

    game = Game.from_config(cfg)
    for col in _parse_moves(moves):
        try:
            game.drop(col)
        except ValueError as exc:
            raise typer.BadParameter(f"cannot play column {col}: {exc}") from exc

    console.print(render_board(game))
    if game.over():
        winner = game.winner()
        console.print("Result: draw" if winner is None else f"Result: {winner.player} wins")
        raise typer.Exit(code=0)

    agent = MCTSAgent("MCTS", think_time=think_time, seed=seed, progress=progress)
    best = agent.select_move(game)
    r = agent.last_result
    assert r is not None
    console.print(f"ran {r.rollouts} simulations; (w/l/t={r.wins}/{r.losses}/{r.ties})")
    console.print(weights_table(agent, game.state(), game.valid_moves()))
    console.print(f"best move for {game.current_player()}: {best}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
