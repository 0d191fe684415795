from textual.widgets import Static
from rich.text import Text

LOGO = (
    "  ####   ####  #    # #    #  ###  #   # ####  #   #",
    " #      #    # ##  ## ##  ## #   # ##  # #   #  # # ",
    " #      #    # # ## # # ## # ##### # # # #   #   #  ",
    " #      #    # #    # #    # #   # #  ## #   #   #  ",
    "  ####   ####  #    # #    # #   # #   # ####    #  ",
)
TAGLINE = "~ Terminal Session Launcher ~"
INNER_WIDTH = 55


class Banner(Static):
    def __init__(self, hostname: str, **kwargs):
        super().__init__(**kwargs)
        self.hostname = hostname

    def render(self):
        return banner_text(self.hostname)


def banner_text(hostname: str) -> Text:
    border = "cyan"
    text = Text()
    text.append("╔" + "═" * INNER_WIDTH + "╗\n", style=border)
    for row in LOGO:
        text.append("║", style=border)
        text.append(f" {row}".ljust(INNER_WIDTH), style="bold blue")
        text.append("║\n", style=border)
    text.append("║", style=border)
    text.append(TAGLINE.center(INNER_WIDTH), style="yellow")
    text.append("║\n", style=border)
    host_line = f"Host: {hostname}".center(INNER_WIDTH)
    text.append("║", style=border)
    text.append(host_line, style="green")
    text.append("║\n", style=border)
    text.append("╚" + "═" * INNER_WIDTH + "╝", style=border)
    return text
