"""Render one map view to a standalone HTML file.

Usage:
    python scripts/render_map.py                       # nation
    python scripts/render_map.py Texas                 # state
    python scripts/render_map.py Texas Austin          # city
    python scripts/render_map.py Texas Austin --network --out austin.html
"""

import argparse
import asyncio
import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from app.client.api import HeatmapApiClient
from app.client.navigator import MapNavigator, NavigationError
from app.client.render import build_figure
from app.client.scaling import DEFAULT_METRIC, METRICS


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a Heatmap Center map view to HTML")
    parser.add_argument("state", nargs="?")
    parser.add_argument("city", nargs="?")
    parser.add_argument("--metric", default=DEFAULT_METRIC, choices=METRICS)
    parser.add_argument("--network", action="store_true", help="store/seller network view (city only)")
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--out", default="map.html")
    return parser.parse_args()


async def render(args: argparse.Namespace) -> bool:
    errors: list[str] = []

    def on_event(event: str, payload: dict) -> None:
        if event == "error":
            errors.append(payload["message"])

    async with HeatmapApiClient(args.base_url) as api:
        nav = MapNavigator(api)
        nav.subscribe(on_event)

        print(f"🗺️  Loading nation view from {args.base_url} ...")
        if not await nav.show_nation():
            print(f"❌ Nation view failed: {errors[-1] if errors else 'unknown error'}")
            return False

        if args.state:
            print(f"🔎 Drilling into {args.state} ...")
            if not await nav.select_region(args.state):
                print(f"❌ State view failed: {errors[-1] if errors else 'unknown error'}")
                return False
            nav.set_metric(args.metric)
            print(f"✅ {len(nav.sub_regions)} sub-regions")

        if args.state and args.city:
            print(f"🔎 Drilling into {args.city} ...")
            if not await nav.select_sub_region(args.city):
                print(f"❌ City view failed: {errors[-1] if errors else 'unknown error'}")
                return False
            print(f"✅ {len(nav.stores)} stores, {len(nav.sellers)} sellers, {len(nav.edges)} connections")
            if args.network:
                try:
                    nav.toggle_network()
                except NavigationError as exc:
                    print(f"⚠️ Network view unavailable: {exc}")

    fig = build_figure(nav.layer)
    fig.write_html(args.out, include_plotlyjs="cdn")
    print(f"✅ Wrote {nav.view.level.value} map to {args.out}")
    return True


def main() -> None:
    args = parse_args()
    if args.city and not args.state:
        print("❌ A city needs its state")
        sys.exit(2)
    ok = asyncio.run(render(args))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
