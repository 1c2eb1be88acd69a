"""vidchat - Streamlit Chat Interface.

Thin client for the transcript chat API. All business logic lives in the
FastAPI backend. This file handles:
  - Conversation state (st.session_state), sent in full with every request
  - POST /api/chat with incremental rendering of the streamed reply
  - Optional image URL attached to the next question
  - Source citations and stream errors carried on the data/error frames
"""

import os
import time

import requests
import streamlit as st

from vidchat.core.stream import DataFrame, ErrorFrame, TextFrame
from vidchat.core.wire import FrameDecodeError, decode_frame

# Config
API_URL = os.environ.get("API_URL", "http://localhost:8000")
CHAT_ENDPOINT = f"{API_URL}/api/chat"
HEALTH_ENDPOINT = f"{API_URL}/health"

st.set_page_config(page_title="vidchat", layout="centered")


def init_session():
    """Initialize session state on first load."""
    if "messages" not in st.session_state:
        st.session_state.messages = []
    if "api_online" not in st.session_state:
        st.session_state.api_online = False


def render_sources(sources: list[dict]):
    if not sources:
        return
    with st.expander(f"Sources ({len(sources)})"):
        for node in sources:
            video = node.get("metadata", {}).get("video_id")
            label = f"**{video}**" if video else f"`{node.get('id')}`"
            st.markdown(f"{label} (score {node.get('score', 0):.2f})")
            st.caption(node.get("text", "")[:300])


def render_message(msg: dict):
    """Render a single chat message with its attachments."""
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])
        if msg.get("image_url"):
            st.image(msg["image_url"], use_container_width=True)
        render_sources(msg.get("sources", []))


def _api_messages() -> list[dict]:
    return [{"role": m["role"], "content": m["content"]} for m in st.session_state.messages]


def send_message(user_input: str, image_url: str | None):
    """POST the conversation to the streaming backend and render the reply."""
    st.session_state.messages.append({
        "role": "user",
        "content": user_input,
        "image_url": image_url,
    })
    render_message(st.session_state.messages[-1])

    with st.chat_message("assistant"):
        placeholder = st.empty()
        text = ""
        sources: list[dict] = []
        stream_error = None

        try:
            start_time = time.monotonic()
            resp = requests.post(
                CHAT_ENDPOINT,
                json={
                    "messages": _api_messages(),
                    "data": {"imageUrl": image_url} if image_url else {},
                },
                timeout=60,
                stream=True,
            )

            if resp.status_code != 200:
                try:
                    error = resp.json().get("error", resp.text)
                except ValueError:
                    error = resp.text
                st.error(f"[ERROR] Server error ({resp.status_code}): {error}")
                st.session_state.messages.pop()
                return

            for line in resp.iter_lines(decode_unicode=True):
                if not line:
                    continue
                try:
                    frame = decode_frame(line)
                except FrameDecodeError:
                    continue

                if isinstance(frame, TextFrame):
                    text += frame.text
                    placeholder.markdown(text + "▌")
                elif isinstance(frame, DataFrame) and isinstance(frame.value, dict):
                    if frame.value.get("type") == "sources":
                        sources.extend(frame.value.get("data", {}).get("nodes", []))
                elif isinstance(frame, ErrorFrame):
                    stream_error = frame.message

            latency_ms = int((time.monotonic() - start_time) * 1000)

        except requests.Timeout:
            st.error("[TIMEOUT] Request timed out. The server may be overloaded.")
            return
        except requests.ConnectionError:
            st.error("[DISCONNECT] Cannot connect to the backend. Is the API server running?")
            return

        placeholder.markdown(text or "_No response received._")
        render_sources(sources)
        if stream_error:
            st.warning(f"[WARN] The response was cut short: {stream_error}")
        st.caption(f"[TIME] {latency_ms}ms")

    st.session_state.messages.append({
        "role": "assistant",
        "content": text,
        "sources": sources,
    })


def main():
    """Run the Streamlit chat application."""
    init_session()

    api_status = "unknown"
    try:
        health_resp = requests.get(HEALTH_ENDPOINT, timeout=3)
        api_status = health_resp.json().get("status", "unknown")
        st.session_state.api_online = api_status in ("healthy", "degraded")
    except requests.RequestException:
        st.session_state.api_online = False
        api_status = "offline"

    st.title("vidchat")
    st.caption("Ask questions about your ingested YouTube videos")

    if not st.session_state.api_online:
        st.warning("[WARN] The vidchat API is currently offline.")

    with st.sidebar:
        st.markdown(f"### API status: `{api_status}`")
        image_url = st.text_input("Image URL (optional)", placeholder="https://...")
        st.divider()
        if st.button("[DEL] New Conversation", use_container_width=True):
            st.session_state.messages = []
            st.rerun()

    for msg in st.session_state.messages:
        render_message(msg)

    if user_input := st.chat_input("Ask a question about the videos..."):
        send_message(user_input, image_url.strip() or None)


if __name__ == "__main__":
    main()
