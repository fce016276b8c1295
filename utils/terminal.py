"""
Console output for the TikTok batch downloader: colored status lines,
per-link progress bar and the end-of-batch tally.
"""


class Colors:
    """ANSI color codes for terminal output."""
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    RESET = '\033[0m'


def print_header(text: str):
    """Print a header line."""
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'═' * 60}{Colors.RESET}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text.center(60)}{Colors.RESET}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'═' * 60}{Colors.RESET}\n")


def print_success(text: str):
    print(f"  {Colors.GREEN}✓{Colors.RESET} {text}")


def print_error(text: str):
    print(f"  {Colors.RED}✗{Colors.RESET} {text}")


def print_warning(text: str):
    print(f"  {Colors.YELLOW}⚠{Colors.RESET} {text}")


def print_info(text: str):
    print(f"  {Colors.BLUE}ℹ{Colors.RESET} {text}")


def print_progress(current: int, total: int, link: str, width: int = 50):
    """Print the [i/n] bar and the link being processed.

    Long links are cut from the front so the @handle and video id stay visible.
    """
    pct = (current / total * 100) if total > 0 else 0
    bar_width = 30
    filled = int(bar_width * current / total) if total > 0 else 0
    bar = '█' * filled + '░' * (bar_width - filled)
    shown = link if len(link) <= width else '...' + link[-(width - 3):]
    print(f"\n{Colors.BOLD}[{current}/{total}]{Colors.RESET} {bar} {pct:.0f}%")
    print(f"  {Colors.CYAN}{shown}{Colors.RESET}")


def print_counts(success: int, skipped: int, failed: int, total: int):
    """Print the end-of-batch tally."""
    print(f"  {Colors.GREEN}Success:{Colors.RESET} {success}")
    print(f"  {Colors.YELLOW}Skipped:{Colors.RESET} {skipped}")
    print(f"  {Colors.RED}Failed:{Colors.RESET} {failed}")
    print(f"  Total: {total}")
