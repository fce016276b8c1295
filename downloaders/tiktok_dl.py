#!/usr/bin/env python3
"""
TikTok Batch Downloader - Download TikTok videos listed in links.txt

Reads comma-separated TikTok URLs from links.txt, resolves each one through
tikdownloader.io to a TikTok CDN video URL and caption, and saves the video
into ./videos named after the caption, credited to the original poster:

    videos/CC_alice_Hello_fun.mp4

links.txt is emptied once every link has been attempted.

Usage:
    tiktok-dl                                  # links.txt -> ./videos
    tiktok-dl --links my_links.txt             # Custom links file
    tiktok-dl --output-dir /path               # Custom output directory
    tiktok-dl --dry-run                        # Resolve only, no download
    tiktok-dl --stream                         # Write videos in chunks
    python -m downloaders.tiktok_dl            # Same, without installing
"""

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

import requests

from scrapers.tikdownloader import (
    DEFAULT_TIMEOUT,
    NO_CACHE_HEADERS,
    PARSERS,
    NoMediaFound,
    ResponseParser,
    resolve_media,
)
from utils.filenames import build_filename
from utils.terminal import (
    print_counts,
    print_error,
    print_header,
    print_info,
    print_progress,
    print_success,
    print_warning,
)

# ============================================================================
# CONFIGURATION
# ============================================================================

DEFAULT_LINKS_FILE = "links.txt"
DEFAULT_OUTPUT_DIR = "videos"
CHUNK_SIZE = 8192
PART_SUFFIX = ".part"


@dataclass
class RunSummary:
    """Outcome of one batch run."""
    total: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    saved: List[Path] = field(default_factory=list)
    source_cleared: bool = False
    error: Optional[str] = None
    dry_run: bool = False


# ============================================================================
# LINK SOURCE
# ============================================================================

def parse_links(content: str) -> List[str]:
    """Split comma-separated links, dropping blanks."""
    return [link.strip() for link in content.split(',') if link.strip()]


def read_links(links_file: Path) -> List[str]:
    """Read links from the links file. Raises OSError if unreadable."""
    with open(links_file, 'r', encoding='utf-8') as f:
        return parse_links(f.read())


def clear_links(links_file: Path) -> bool:
    """Empty the links file. Returns False if it could not be written."""
    try:
        with open(links_file, 'w', encoding='utf-8') as f:
            f.write('')
    except OSError as e:
        print_error(f"Failed to clear {links_file.name}: {e}")
        return False
    print_success(f"Cleared {links_file.name}")
    return True


# ============================================================================
# DOWNLOAD LOGIC
# ============================================================================

def fetch_media(url: str, output_path: Path, stream: bool = False,
                timeout: Optional[float] = DEFAULT_TIMEOUT) -> Path:
    """Download the video at url to output_path.

    The whole body is buffered before writing unless stream is set, in which
    case it is written chunk by chunk. Either way the body goes to a .part
    file that replaces output_path only once complete. Raises
    requests.HTTPError on a non-success status.
    """
    response = requests.get(url, headers=NO_CACHE_HEADERS, stream=stream, timeout=timeout)
    response.raise_for_status()

    part_path = output_path.with_name(output_path.name + PART_SUFFIX)
    try:
        with open(part_path, 'wb') as f:
            if stream:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
            else:
                f.write(response.content)
        part_path.replace(output_path)
    finally:
        part_path.unlink(missing_ok=True)

    return output_path


def process_link(link: str, output_dir: Path, parser: ResponseParser,
                 stream: bool = False, dry_run: bool = False,
                 timeout: Optional[float] = DEFAULT_TIMEOUT) -> Path:
    """Resolve and download a single link. Returns the target path."""
    media = resolve_media(link, parser=parser, timeout=timeout)
    output_path = output_dir / build_filename(media.caption, media.username)

    print_info(f"Poster: @{media.username}")
    print_info(f"Caption: {media.caption}")

    if dry_run:
        print_info(f"Media URL: {media.media_url}")
        print_info(f"Output: {output_path.name}")
        return output_path

    fetch_media(media.media_url, output_path, stream=stream, timeout=timeout)
    size_mb = output_path.stat().st_size / (1024 * 1024)
    print_success(f"Saved: {output_path} ({size_mb:.1f} MB)")
    return output_path


def run(links_file=DEFAULT_LINKS_FILE, output_dir=DEFAULT_OUTPUT_DIR,
        parser: Optional[ResponseParser] = None, stream: bool = False,
        dry_run: bool = False, keep_links: bool = False,
        timeout: Optional[float] = DEFAULT_TIMEOUT) -> RunSummary:
    """Download every link in links_file into output_dir."""
    links_file = Path(links_file).resolve()
    output_dir = Path(output_dir).resolve()
    parser = parser or PARSERS['regex']()
    summary = RunSummary(dry_run=dry_run)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print_error(f"Cannot create output directory {output_dir}: {e}")
        summary.error = str(e)
        return summary

    try:
        links = read_links(links_file)
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Error reading {links_file.name}: {e}")
        summary.error = str(e)
        return summary

    if not links:
        print_warning(f"No links found in {links_file.name}")
        return summary

    summary.total = len(links)
    print_info(f"Links: {len(links)}")
    print_info(f"Output directory: {output_dir}")

    for i, link in enumerate(links, 1):
        print_progress(i, len(links), link)
        try:
            output_path = process_link(link, output_dir, parser, stream, dry_run, timeout)
        except NoMediaFound as e:
            print_error(str(e))
            summary.skipped += 1
        except Exception as e:
            print_error(f"Error processing {link}: {e}")
            summary.failed += 1
        else:
            summary.succeeded += 1
            if not dry_run:
                summary.saved.append(output_path)

    if dry_run:
        print_info(f"Dry run, {links_file.name} left untouched")
    elif keep_links:
        print_info(f"Keeping {links_file.name}")
    else:
        summary.source_cleared = clear_links(links_file)

    return summary


# ============================================================================
# CLI ENTRY POINT
# ============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Batch download TikTok videos listed in a links file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --links my_links.txt --output-dir ./downloads
  %(prog)s --dry-run --parser soup
        """
    )

    parser.add_argument('--links', '-l', default=DEFAULT_LINKS_FILE,
                        help=f'Comma-separated links file (default: {DEFAULT_LINKS_FILE})')
    parser.add_argument('--output-dir', '-o', default=DEFAULT_OUTPUT_DIR,
                        help=f'Output directory (default: {DEFAULT_OUTPUT_DIR})')
    parser.add_argument('--parser', '-p', default='regex', choices=sorted(PARSERS),
                        help='Lookup markup parser (default: regex)')
    parser.add_argument('--stream', action='store_true',
                        help='Write videos in chunks instead of buffering them')
    parser.add_argument('--timeout', '-t', type=float, default=DEFAULT_TIMEOUT,
                        help=f'Network timeout in seconds (default: {DEFAULT_TIMEOUT})')
    parser.add_argument('--dry-run', action='store_true',
                        help='Resolve links only, do not download or clear the links file')
    parser.add_argument('--keep-links', action='store_true',
                        help='Do not clear the links file after the run')

    args = parser.parse_args(argv)

    print_header("TikTok Batch Downloader")

    summary = run(
        links_file=args.links,
        output_dir=args.output_dir,
        parser=PARSERS[args.parser](),
        stream=args.stream,
        dry_run=args.dry_run,
        keep_links=args.keep_links,
        timeout=args.timeout,
    )

    if summary.error:
        sys.exit(1)

    if summary.total:
        print_header("Dry Run Complete" if summary.dry_run else "Download Complete")
        print_counts(summary.succeeded, summary.skipped, summary.failed, summary.total)
        if not (summary.source_cleared or summary.dry_run or args.keep_links):
            print_warning(f"{Path(args.links).name} could not be cleared")


if __name__ == '__main__':
    main()
