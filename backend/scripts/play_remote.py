#!/usr/bin/env python3
"""
Play games against a running server through the games API.

Picks tiles greedily (finish dock pairs first), waits out the match and
loss delays between moves, and moves on to level 2 after a tutorial win.
"""
import argparse
import asyncio
from collections import Counter
from typing import Dict, List, Optional

import httpx

API_BASE = "http://localhost:8000"
# Slightly longer than the server's loss delay
SETTLE_SECONDS = 0.35


def pick_tile(state: Dict) -> Optional[str]:
    """Choose the next tile id, or None when nothing is clickable."""
    candidates = [t for t in state["board"] if t["is_clickable"]]
    if not candidates:
        return None

    dock_counts = Counter(t["type"] for t in state["dock"])
    open_counts = Counter(t["type"] for t in candidates)
    best = max(candidates, key=lambda t: (dock_counts[t["type"]], open_counts[t["type"]]))
    return best["id"]


async def play_game(client: httpx.AsyncClient, session_id: str, verbose: bool) -> Dict:
    """Play the current board of a session to the end."""
    state = (await client.get(f"{API_BASE}/api/games/{session_id}")).json()

    while state["phase"] == "playing":
        if state["pending_check"]:
            await asyncio.sleep(SETTLE_SECONDS)
            state = (await client.get(f"{API_BASE}/api/games/{session_id}")).json()
            continue

        tile_id = pick_tile(state)
        if tile_id is None:
            break

        response = await client.post(
            f"{API_BASE}/api/games/{session_id}/select",
            json={"tile_id": tile_id},
        )
        response.raise_for_status()
        move = response.json()
        state = move["state"]

        if verbose:
            dock = " ".join(t["type"] for t in state["dock"])
            print(f"  {tile_id:28} -> [{dock}]")
        if not move["accepted"]:
            print(f"  rejected: {move['reason']}")
            break

    return state


async def run(level: int, games: int, verbose: bool) -> List[Dict]:
    results = []
    async with httpx.AsyncClient(timeout=30.0) as client:
        for game in range(1, games + 1):
            response = await client.post(f"{API_BASE}/api/games", json={"level": level})
            response.raise_for_status()
            session_id = response.json()["session_id"]

            current_level = level
            while True:
                state = await play_game(client, session_id, verbose)
                score = state["score"]
                print(f"Game {game} level {current_level}: {state['phase']} "
                      f"{score['percentage']}% {score['rank']} - {state['message']}")
                results.append(state)

                if state["next_level"] is None:
                    break
                current_level = state["next_level"]
                await client.post(
                    f"{API_BASE}/api/games/{session_id}/start",
                    json={"level": current_level},
                )

            await client.delete(f"{API_BASE}/api/games/{session_id}")

    return results


def main():
    global API_BASE

    parser = argparse.ArgumentParser(description="Play games through the HTTP API")
    parser.add_argument("--level", "-l", type=int, default=1, help="Starting level (default: 1)")
    parser.add_argument("--games", "-g", type=int, default=3, help="Games to play (default: 3)")
    parser.add_argument("--base-url", type=str, default=API_BASE, help="Server base URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print every move")
    args = parser.parse_args()

    API_BASE = args.base_url.rstrip("/")
    results = asyncio.run(run(args.level, args.games, args.verbose))

    won = sum(1 for s in results if s["phase"] == "won")
    print("=" * 60)
    print(f"Boards played: {len(results)}, won: {won}")
    print("=" * 60)


if __name__ == "__main__":
    main()
