"""Pass-and-play terminal front end."""

import argparse
import logging
import random
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from .exceptions import WordFetchError
from .formatting import card_label, round_header, separator, winner_banner
from .models import ActionResult, ErrorKind, Phase, Player
from .models import Prompt as UiPrompt
from .roles import Role
from .services import ActionDispatcher, SessionManager, WordService
from .services.word_generator import WordPairGenerator
from .settings import Settings
from .types import GameConfig

console = Console()


def report(result: ActionResult) -> bool:
    """Print the error of a failed action. Returns whether it succeeded."""
    if not result.success and result.error:
        console.print(f"[red]{result.error.message}[/red]")
    return result.success


def fetch_words(words: WordService, count: int) -> int:
    """Fetch and store new pairs. Returns how many were added."""
    console.print(f"[yellow]Fetching {count} new word pairs...[/yellow]")
    try:
        added = words.add_words(words.fetch_more(count))
    except WordFetchError as e:
        console.print(f"[red]Could not fetch new words: {e}[/red]")
        return 0
    console.print(f"[green]Added {added} new word pairs.[/green]")
    return added


def ensure_words(words: WordService, fetch_count: int) -> bool:
    """Make sure at least one unplayed pair exists, asking the players if needed."""
    if not words.all_played():
        return True

    console.print("[yellow]Every word pair has been played.[/yellow]")
    if words.generator is not None and Confirm.ask("Fetch new words?", default=True):
        if fetch_words(words, fetch_count):
            return True
    if Confirm.ask("Play the old words again?", default=True):
        words.reset_all()
        return True
    return False


def display_card_grid(manager: SessionManager) -> None:
    """Show which cards are still face down."""
    state = manager.state
    table = Table(title="Cards", show_header=False)
    row = []
    for index in range(len(state.players)):
        taken = not manager.is_card_available(index)
        row.append(f"[dim]{card_label(index)}[/dim]" if taken else f"[cyan]{card_label(index)}[/cyan]")
    table.add_row(*row)
    console.print(table)


def show_word(player: Player) -> None:
    """Show a player's secret word, then clear the screen."""
    if player.role == Role.MR_WHITE:
        body = "[bold]You are Mr. White.[/bold]\nYou have no word. Listen carefully and bluff."
    else:
        body = f"Your word is\n\n[bold magenta]{player.word}[/bold magenta]"
    console.print(Panel(body, title=player.display_name(), expand=False))
    Prompt.ask("Press Enter to hide your word", default="", show_default=False)
    console.clear()


def run_card_selection(manager: SessionManager) -> None:
    """One player picks a card, names themselves if needed and sees their word."""
    state = manager.state
    player = state.current_player
    if state.round == 1:
        console.print(f"\n[bold]Player {state.current_player_index + 1}[/bold], pick a card.")
    else:
        console.print(f"\nPass the device to [bold]{player.display_name()}[/bold].")
    display_card_grid(manager)

    index = IntPrompt.ask("Card number") - 1
    result = manager.select_card(index)
    if not report(result):
        return

    if result.side_effects and result.side_effects.open_prompt == UiPrompt.NAME_ENTRY:
        while not report(manager.submit_player_name(Prompt.ask("Your name"))):
            pass

    show_word(manager.state.current_player)
    report(manager.reveal_word_next())


def run_description(manager: SessionManager) -> None:
    """List the speaking order and wait for the table to finish describing."""
    state = manager.state
    console.print(round_header(state.round))
    console.print("Describe your word without saying it, in this order:\n")
    for position, player in enumerate(manager.get_description_order(), start=1):
        if player.is_eliminated:
            console.print(f"  [dim]{position}. {player.display_name()} (out)[/dim]")
        else:
            console.print(f"  {position}. {player.display_name()}")
    Prompt.ask("\nPress Enter when everyone has spoken", default="", show_default=False)
    report(manager.begin_voting())


def run_voting(manager: SessionManager) -> None:
    """Let the table pick who to eliminate and reveal their role."""
    table = Table(title="Vote")
    table.add_column("#", style="cyan")
    table.add_column("Player")
    table.add_column("Status")
    for player in manager.get_voting_order():
        status = "[red]out[/red]" if player.is_eliminated else "in"
        table.add_row(str(player.id), player.display_name(), status)
    console.print(table)

    player_id = IntPrompt.ask("Who does the table vote out? (#)")
    if not report(manager.select_player_for_elimination(player_id)):
        return

    target = manager.state.get_player(player_id)
    if not Confirm.ask(f"Eliminate {target.display_name()}?", default=True):
        manager.undo()
        return

    if not report(manager.eliminate_player()):
        return

    eliminated = manager.state.eliminated_player
    console.print(
        Panel(
            f"{eliminated.display_name()} was [bold]{eliminated.role.display_name()}[/bold]",
            title="Eliminated",
            expand=False,
        )
    )
    report(manager.confirm_elimination())


def run_mr_white_guess(manager: SessionManager) -> None:
    """Mr. White gets one guess at the civilian word."""
    state = manager.state
    guesser = state.get_player(state.guessing_player_id)
    console.print(f"\n👻 [bold]{guesser.display_name()}[/bold] is Mr. White and gets one guess.")
    while not report(manager.process_mr_white_guess(Prompt.ask("The Civilians' word is"))):
        pass

    state = manager.state
    if state.winner == Role.MR_WHITE:
        console.print("[bold green]Correct![/bold green]")
    elif state.phase == Phase.GAME_OVER:
        console.print(f"[bold red]Wrong![/bold red] {guesser.display_name()} is out.")
    else:
        console.print(
            f"[bold red]Wrong![/bold red] {guesser.display_name()} is out and the game goes on "
            f"to round {state.round}."
        )


def display_game_end(manager: SessionManager) -> None:
    """Show the winner, everyone's role and the words."""
    state = manager.state
    console.print("\n" + separator())
    console.print(f"[bold green]{winner_banner(state.winner)}[/bold green]")
    console.print(separator() + "\n")

    console.print(f"Civilian word: [bold]{state.game_words.civilian}[/bold]")
    console.print(f"Undercover word: [bold]{state.game_words.undercover}[/bold]")
    if state.mr_white_guess:
        console.print(f"Mr. White guessed: [bold]{state.mr_white_guess}[/bold]")

    winners = {p.id for p in manager.get_winner_players()}
    table = Table(title="Final roles")
    table.add_column("Player", style="cyan")
    table.add_column("Role", style="magenta")
    table.add_column("Word", style="yellow")
    table.add_column("")
    for player in state.players:
        mark = "🏆" if player.id in winners else ("✗" if player.is_eliminated else "")
        table.add_row(player.display_name(), player.role.display_name(), player.word or "-", mark)
    console.print(table)


def run_game_over(manager: SessionManager, words: WordService, args: argparse.Namespace) -> bool:
    """Ask what to do next. Returns False when the players want to quit."""
    display_game_end(manager)
    choice = Prompt.ask(
        "[c]ontinue with the same players, [n]ew game or [q]uit",
        choices=["c", "n", "q"],
        default="c",
    )
    if choice == "q":
        return False
    if choice == "n":
        manager.reset_game()
        return True

    if ensure_words(words, args.fetch or 5):
        result = manager.continue_with_same_players()
        if result.success:
            console.clear()
        else:
            report(result)
    return True


def run_setup(manager: SessionManager, words: WordService, args: argparse.Namespace) -> bool:
    """Start a new game. Returns False if it could not be started."""
    if not ensure_words(words, args.fetch or 5):
        return False

    config: GameConfig = {
        "total_players": args.players,
        "undercover": args.undercover,
        "mr_white": args.mr_white,
    }
    result = manager.start_game(**config)
    if result.error_kind == ErrorKind.INVALID_CONFIG:
        console.print(f"[red]Invalid setup: {result.error.message}[/red]")
        return False
    return report(result)


def run_session(manager: SessionManager, words: WordService, args: argparse.Namespace) -> None:
    """Drive the session until the players quit."""
    console.print("\n[bold cyan]🕵️  UNDERCOVER 🕵️[/bold cyan]\n")
    while True:
        phase = manager.state.phase
        if phase == Phase.SETUP:
            if not run_setup(manager, words, args):
                return
        elif phase == Phase.CARD_SELECTION:
            run_card_selection(manager)
        elif phase == Phase.DESCRIPTION:
            run_description(manager)
        elif phase == Phase.VOTING:
            run_voting(manager)
        elif phase == Phase.MR_WHITE_GUESS:
            run_mr_white_guess(manager)
        elif phase == Phase.GAME_OVER:
            if not run_game_over(manager, words, args):
                return


def autosave_to(manager: SessionManager, path: Path) -> None:
    """Write the session to ``path`` after every change."""

    def save(new_state, previous_state) -> None:
        path.write_text(manager.export_state(), encoding="utf-8")

    manager.subscribe(save)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Undercover - a pass-and-play word game for one shared device"
    )
    parser.add_argument(
        "--players",
        type=int,
        default=5,
        choices=range(3, 21),
        metavar="[3-20]",
        help="Number of players (default: 5)"
    )
    parser.add_argument(
        "--undercover",
        type=int,
        default=1,
        help="Number of Undercover players (default: 1)"
    )
    parser.add_argument(
        "--mr-white",
        type=int,
        default=0,
        help="Number of Mr. White players (default: 0)"
    )
    parser.add_argument(
        "--words-file",
        help="JSON file holding the word bank (default: $UNDERCOVER_WORDS_FILE, else in memory)"
    )
    parser.add_argument(
        "--reset-words",
        action="store_true",
        help="Mark every word pair as unplayed before starting"
    )
    parser.add_argument(
        "--fetch",
        type=int,
        default=0,
        metavar="N",
        help="Fetch N new word pairs from the word generator before starting"
    )
    parser.add_argument(
        "--language",
        default="Indonesian",
        help="Language for generated word pairs (default: Indonesian)"
    )
    parser.add_argument(
        "--save",
        type=Path,
        help="Save the session to this file after every action"
    )
    parser.add_argument(
        "--resume",
        type=Path,
        help="Resume a session saved with --save"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for role shuffles, word draws and turn order"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console)],
    )

    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    rng = random.Random(args.seed)

    generator = None
    if settings.anthropic_api_key:
        generator = WordPairGenerator(
            api_key=settings.anthropic_api_key,
            model=settings.model,
            language=args.language,
        )

    words = WordService(args.words_file or settings.words_file, generator=generator, rng=rng)
    if args.reset_words:
        words.reset_all()
    if args.fetch:
        if generator is None:
            console.print("[yellow]Set ANTHROPIC_API_KEY in your .env file to fetch words[/yellow]")
        else:
            fetch_words(words, args.fetch)

    manager = SessionManager(ActionDispatcher(words, rng), max_history=settings.history_size)

    if args.resume:
        try:
            saved = args.resume.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Could not read {args.resume}: {e}[/red]")
            return 1
        if not manager.import_state(saved):
            console.print(f"[red]{args.resume} is not a valid saved session[/red]")
            return 1

    if args.save:
        autosave_to(manager, args.save)

    try:
        run_session(manager, words, args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Game interrupted by user[/yellow]")
        return 0

    return 0


if __name__ == "__main__":
    exit(main())
