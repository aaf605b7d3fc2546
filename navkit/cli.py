import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from navkit.environment import NavSettings, load_settings
from navkit.site_info import SiteInfoClient
from navkit.storage import FileStore, detect_image_format

logger = logging.getLogger(__name__)


async def _run_fetch(url: str, settings: NavSettings) -> bool:
    async with SiteInfoClient(
        config=settings.site_info, store=FileStore(settings.storage)
    ) as client:
        info = await client.fetch_site_info(url)

    if info is None:
        print("Could not retrieve site info; enter the details manually.", file=sys.stderr)
        return False
    print(info.model_dump_json(indent=2))
    return True


async def _run_download_icon(url: str, settings: NavSettings) -> bool:
    async with SiteInfoClient(
        config=settings.site_info, store=FileStore(settings.storage)
    ) as client:
        local_url = await client.download_icon(url)

    print(json.dumps({"icon_url": url, "local_url": local_url}, indent=2))
    return local_url is not None


def _check_image(path: Path) -> bool:
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return False

    fmt = detect_image_format(data)
    print(json.dumps({"path": str(path), "format": fmt, "size": len(data)}, indent=2))
    return fmt is not None


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(prog="navkit", description="Navigation site toolkit")
    parser.add_argument(
        "--upload-root", help="Directory icons are written to (overrides NAV_UPLOAD_ROOT)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Scrape title, description and icon for a site")
    fetch.add_argument("url", help="Site URL (http or https)")

    download = subparsers.add_parser("download-icon", help="Download an icon into local storage")
    download.add_argument("url", help="Icon URL (http or https)")

    check = subparsers.add_parser("check-image", help="Detect the image format of a local file")
    check.add_argument("path", help="File to inspect")

    args = parser.parse_args(argv)

    settings = load_settings()
    if args.upload_root:
        settings.storage.upload_root = Path(args.upload_root)

    logging.basicConfig(
        level=settings.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    if args.command == "fetch":
        success = asyncio.run(_run_fetch(args.url, settings))
    elif args.command == "download-icon":
        success = asyncio.run(_run_download_icon(args.url, settings))
    else:
        success = _check_image(Path(args.path))

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
