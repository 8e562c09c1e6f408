#!/usr/bin/env python3
"""Simple client that plays one round against a running memory game server."""

import asyncio
import json
from typing import Optional
import httpx
import websockets

BASE_URL = "http://localhost:8000"
WS_URL = "ws://localhost:8000"


async def check_health():
    """Check health endpoint."""
    async with httpx.AsyncClient() as client:
        response = await client.get(f"{BASE_URL}/api/health")
        print(f"Health check: {response.json()}")
        return response.status_code == 200


async def create_session():
    """Create a short session."""
    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{BASE_URL}/api/sessions",
            json={"cards_amount": 8, "round_duration_seconds": 30},
        )
        print(f"Session created: {response.json()}")
        return response.json()


def pick_move(state: dict, seen: dict[int, str]) -> Optional[int]:
    """Pick a card: finish a known pair if possible, otherwise try an unseen card."""
    matched = set(state["matched"])
    revealed = state["revealed"]
    if len(revealed) >= 2:
        return None

    candidates = [i for i in range(state["cards_amount"]) if i not in matched and i not in revealed]
    if revealed:
        symbol = seen.get(revealed[0])
        for i in candidates:
            if seen.get(i) == symbol:
                return i
    else:
        by_symbol: dict[str, list[int]] = {}
        for i in candidates:
            if i in seen:
                by_symbol.setdefault(seen[i], []).append(i)
        for indices in by_symbol.values():
            if len(indices) == 2:
                return indices[0]

    unseen = [i for i in candidates if i not in seen]
    return (unseen or candidates or [None])[0]


async def play_round(session_id: str):
    """Start a round over the WebSocket and play it to the end."""
    uri = f"{WS_URL}/ws/{session_id}"
    print(f"\nConnecting to {uri}...")

    seen: dict[int, str] = {}

    async with websockets.connect(uri) as ws:
        await ws.send(json.dumps({"type": "start_round"}))

        while True:
            try:
                message = await asyncio.wait_for(ws.recv(), timeout=60.0)
            except asyncio.TimeoutError:
                print("Timeout waiting for message")
                break

            data = json.loads(message)
            event_type = data.get("type", "unknown")

            if event_type == "sound":
                print(f"  [sound] {data.get('sound')}")

            elif event_type == "error":
                print(f"  ERROR: {data.get('message')}")
                break

            elif event_type == "round_state":
                state = data["state"]
                for i, symbol in enumerate(state["cards"]):
                    if symbol is not None:
                        seen[i] = symbol

                if state["phase"] == "ended":
                    summary = state["summary"]
                    print(f"\nRound over! Score {summary['final_score']} (best {summary['high_score']})")
                    print(f"  Found: {' '.join(summary['discovered_symbols'])}")
                    break

                if state["phase"] == "active":
                    move = pick_move(state, seen)
                    if move is not None:
                        await ws.send(json.dumps({"type": "reveal_card", "index": move}))
                        print(f"  -> reveal {move} (score {state['score']}, {state['time_left_seconds']}s left)")


async def main():
    """Run the smoke test."""
    print("=" * 60)
    print("Memory Game Smoke Client")
    print("=" * 60)

    print("\n1. Checking health endpoint...")
    if not await check_health():
        print("Server not running. Start with: python -m memory_game.main")
        return

    print("\n2. Creating session...")
    session = await create_session()
    session_id = session.get("session_id")
    if not session_id:
        print("Failed to create session")
        return

    print("\n3. Playing a round...")
    await play_round(session_id)

    print("\n" + "=" * 60)
    print("Done!")


if __name__ == "__main__":
    asyncio.run(main())
