from dataclasses import replace
from functools import partial
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Static
from textual import events
from rich.text import Text
import logging
from commandy import menus
from commandy.config import AppConfig
from commandy.dispatcher import DispatchMode, Dispatcher, mode_for
from commandy.logs import configure_logging
from commandy.models import (
    CommandOutcome,
    MenuContext,
    MenuFacts,
    MenuItem,
    NavigationContext,
    OutcomeKind,
    State,
)
from commandy.navigation import KEY_DIRECTIONS, TWO_COLUMN_STATES, Direction, navigate, shortcut_index
from commandy.state_machine import Effect, Quit, RunCommand, RunTask, Transition, go_back, transition
from commandy.widgets.banner import Banner
from commandy.widgets.menu_list import MenuList
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

OUTCOME_STYLES = {
    OutcomeKind.SUCCESS: "green",
    OutcomeKind.ERROR: "red",
    OutcomeKind.INFO: "bright_black",
}


class CommandFinished(Message):
    def __init__(self, outcome: CommandOutcome) -> None:
        super().__init__()
        self.outcome = outcome


class Commandy(App):
    CSS_PATH = "commandy.tcss"

    def __init__(self, config: AppConfig | None = None, dispatcher: Dispatcher | None = None, **kwargs):
        super().__init__(**kwargs)
        self.config = config or AppConfig.from_env()
        self.dispatcher = dispatcher or Dispatcher(self.config)
        self.menu_context = MenuContext()
        self.facts = self._load_facts(self.menu_context)
        self.outcome: CommandOutcome | None = None
        self.command_in_flight = False

    def compose(self) -> ComposeResult:
        yield Banner(self.config.hostname, id="banner")
        yield Static("", id="menu-title")
        yield Static("", id="menu-notice")
        yield MenuList(id="menu")
        yield Static("", id="outcome")
        yield Static("", id="help")

    def on_mount(self) -> None:
        self.refresh_screen()

    def current_items(self) -> list[MenuItem]:
        return menus.items(self.menu_context, self.facts)

    def on_key(self, event: events.Key) -> None:
        if self.process_key(event.key, event.character):
            event.stop()
            event.prevent_default()

    def process_key(self, key: str, character: str | None = None) -> bool:
        if self.menu_context.state is State.QUIT:
            return False
        self.outcome = None
        if self.menu_context.state is State.SETUP_PROJECT:
            handled = self._handle_text_key(key, character)
        else:
            handled = self._handle_menu_key(key)
        self.refresh_screen()
        return handled

    def _handle_menu_key(self, key: str) -> bool:
        if key in {"q", "ctrl+c"}:
            if self.menu_context.state is State.ROOT:
                self.apply_transition(Transition(MenuContext(state=State.QUIT), Quit()))
            else:
                self.apply_transition(Transition(go_back(self.menu_context)))
            return True
        if key == "escape":
            self.apply_transition(Transition(go_back(self.menu_context)))
            return True
        if key in KEY_DIRECTIONS:
            self.move_cursor(KEY_DIRECTIONS[key])
            return True
        if key in {"enter", "space"}:
            self.select_item(self.menu_context.cursor)
            return True
        index = shortcut_index(key, len(self.current_items()))
        if index is not None:
            self.select_item(index)
            return True
        return False

    def _handle_text_key(self, key: str, character: str | None) -> bool:
        typed = self.menu_context.typed_text
        if key == "ctrl+c":
            self.apply_transition(Transition(MenuContext(state=State.QUIT), Quit()))
        elif key == "escape":
            self.apply_transition(Transition(go_back(self.menu_context)))
        elif key == "enter":
            self.select_item(0)
        elif key == "backspace":
            self._set_typed(typed[:-1])
        elif key == "space":
            self._set_typed(typed + " ")
        elif character and character.isprintable():
            self._set_typed(typed + character)
        else:
            return False
        return True

    def _set_typed(self, text: str) -> None:
        text = text[: self.config.project_name_limit]
        self.menu_context = replace(self.menu_context, typed_text=text)

    def move_cursor(self, direction: Direction) -> None:
        entries = self.current_items()
        nav = navigate(
            NavigationContext(self.menu_context.cursor, len(entries)),
            direction,
            two_column=self.menu_context.state in TWO_COLUMN_STATES,
        )
        self.menu_context = replace(self.menu_context, cursor=nav.cursor)

    def select_item(self, index: int) -> None:
        entries = self.current_items()
        if index >= len(entries):
            return
        self.menu_context = replace(self.menu_context, cursor=index)
        self.apply_transition(transition(self.menu_context, entries[index], self.config))

    def apply_transition(self, result: Transition) -> None:
        effect = result.effect
        if effect is None:
            self._set_context(result.context)
            return
        if isinstance(effect, Quit):
            self.menu_context = result.context
            self.exit(effect.farewell or None)
            return
        mode = mode_for(effect)
        if mode is DispatchMode.FOREGROUND:
            self._hand_off(effect)
            return
        if mode is DispatchMode.BACKGROUND:
            if self.command_in_flight:
                self.outcome = CommandOutcome.info("A command is already running")
                return
            self._set_context(result.context)
            self._start_background(effect)
            return
        outcome = self.dispatcher.run_immediate(effect)
        self.outcome = outcome
        if outcome is not None and outcome.kind is OutcomeKind.ERROR and result.fallback is not None:
            self._set_context(result.fallback)
        else:
            self._set_context(result.context)

    def _set_context(self, context: MenuContext) -> None:
        self.facts = self._load_facts(context)
        count = len(menus.items(context, self.facts))
        cursor = min(context.cursor, max(0, count - 1))
        self.menu_context = replace(context, cursor=cursor)

    def _load_facts(self, context: MenuContext) -> MenuFacts:
        catalog = self.dispatcher.catalog
        tracker = self.dispatcher.tracker
        state = context.state
        projects = ()
        sessions = frozenset()
        if state is State.BROWSE_PROJECTS:
            projects = catalog.list_projects()
            sessions = tracker.list_sessions()
        elif state is State.SELECT_PROJECT:
            projects = catalog.list_projects(manifest_only=True)
        elif state in {State.PROJECT_ACTIONS, State.SESSIONS}:
            sessions = tracker.list_sessions()
        return MenuFacts(
            hostname=self.config.hostname,
            canonical_host=self.config.canonical_host,
            mac_host=self.config.mac_host,
            sessions=sessions,
            projects=projects,
        )

    def _hand_off(self, effect: Effect) -> None:
        commands = self.dispatcher.foreground_commands(effect)
        if self.dispatcher.needs_terminal(effect):
            try:
                with self.suspend():
                    outcome = self.dispatcher.run_foreground(commands)
            except SuspendNotSupported:
                self.outcome = CommandOutcome.error("Cannot hand over the terminal in this environment")
                return
        else:
            outcome = self.dispatcher.run_foreground(commands)
        if outcome is not None:
            self.outcome = outcome
            return
        self.exit()

    def _start_background(self, effect: Effect) -> None:
        self.command_in_flight = True
        self.outcome = CommandOutcome.info(f"Running {_effect_label(effect)}...")
        self.run_worker(partial(self._background_job, effect), thread=True, group="dispatch", exit_on_error=False)

    def _background_job(self, effect: Effect) -> None:
        try:
            outcome = self.dispatcher.run_background(effect)
        except Exception as exc:
            logger.exception("background job failed: %s", _effect_label(effect))
            outcome = CommandOutcome.error(f"Error: {exc}")
        # always post, or the dispatch slot stays taken
        self.post_message(CommandFinished(outcome))

    def on_command_finished(self, message: CommandFinished) -> None:
        self.command_in_flight = False
        self.outcome = message.outcome
        self.refresh_screen()

    def refresh_screen(self) -> None:
        if not self.is_running:
            return
        try:
            title = self.query_one("#menu-title", Static)
            notice = self.query_one("#menu-notice", Static)
            menu = self.query_one("#menu", MenuList)
            outcome = self.query_one("#outcome", Static)
            help_line = self.query_one("#help", Static)
        except NoMatches:
            return
        state = self.menu_context.state
        title.update(Text(menus.title(self.menu_context), style="bold blue"))
        notice.update(self._notice_text())
        if state is State.SETUP_PROJECT:
            menu.show([], 0, False)
        else:
            menu.show(self.current_items(), self.menu_context.cursor, state in TWO_COLUMN_STATES)
        if self.outcome is None:
            outcome.update("")
        else:
            outcome.update(Text(self.outcome.text, style=OUTCOME_STYLES[self.outcome.kind]))
        help_line.update(Text(self._help_text(), style="bright_black"))

    def _notice_text(self) -> Text:
        state = self.menu_context.state
        if state is State.SETUP_PROJECT:
            text = Text("Enter new project name:\n\n", style="bold blue")
            text.append(f"  > {self.menu_context.typed_text}", style="white")
            text.append("_", style="bold yellow")
            return text
        if state is State.SESSIONS and not self.facts.sessions:
            return Text("  No active tmux sessions", style="bright_black")
        return Text("")

    def _help_text(self) -> str:
        state = self.menu_context.state
        if state is State.SETUP_PROJECT:
            return "enter confirm • esc cancel"
        if state in TWO_COLUMN_STATES:
            return "←/→ columns • ↑/↓ navigate • enter select • q/esc back"
        if state is State.ROOT:
            return "↑/↓ navigate • enter select • 1-9 shortcut • q quit"
        return "↑/↓ navigate • enter select • q/esc back"


def _effect_label(effect: Effect) -> str:
    if isinstance(effect, RunCommand):
        return effect.command.describe()
    if isinstance(effect, RunTask):
        return effect.task.value.replace("-", " ")
    return type(effect).__name__


def run(config: AppConfig | None = None) -> None:
    load_dotenv()
    config = config or AppConfig.from_env()
    configure_logging(config)
    app = Commandy(config=config)
    farewell = app.run()
    if farewell:
        print(f"\n{farewell}")


if __name__ == "__main__":
    run()
