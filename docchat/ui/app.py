# docchat/ui/app.py
import streamlit as st
import requests

from docchat.config import API_BASE, SUPPORTED_EXTENSIONS

st.set_page_config(page_title="DocChat", layout="centered")

st.title("DocChat")
st.write("Upload documents, then ask questions about everything you've uploaded.")

if "messages" not in st.session_state:
    st.session_state.messages = []


# ============================================================
# SIDEBAR: COLLECTION STATUS + UPLOAD
# ============================================================

st.sidebar.header("Knowledge Base")

try:
    response = requests.get(f"{API_BASE}/health", timeout=10)
    if response.status_code == 200:
        health = response.json()
        st.sidebar.metric("Indexed Chunks", health["totalChunks"])
        st.sidebar.caption(f"Collection: {health['collection']}")
    else:
        st.sidebar.error("Cannot connect to API")
except requests.RequestException as e:
    st.sidebar.error(f"API Error: {e}")

st.sidebar.divider()

uploaded_file = st.sidebar.file_uploader(
    "Upload a document",
    type=SUPPORTED_EXTENSIONS,
)

if uploaded_file and st.sidebar.button("Upload", type="primary", use_container_width=True):
    with st.spinner("Extracting and indexing document..."):
        try:
            files = {
                "file": (uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type)
            }
            response = requests.post(f"{API_BASE}/upload", files=files, timeout=300)
            result = response.json()

            if response.status_code == 200:
                st.sidebar.success(result["message"])
                st.sidebar.info(f"Chunks added: {result['chunksAdded']}")
            else:
                st.sidebar.error(result.get("details") or result.get("error", "Upload failed"))
        except requests.RequestException as e:
            st.sidebar.error(f"Error: {e}")


# ============================================================
# CHAT
# ============================================================

def render_sources(sources):

    if not sources:
        return

    with st.expander(f"Sources ({len(sources)})"):
        for source in sources:
            st.write(f"{source['fileName']}, chunk {source['chunkIndex']}")


for message in st.session_state.messages:
    with st.chat_message(message["role"]):
        st.markdown(message["content"])
        render_sources(message.get("sources"))

question = st.chat_input("Ask about your documents")

if question:

    st.session_state.messages.append({"role": "user", "content": question})

    with st.chat_message("user"):
        st.markdown(question)

    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            try:
                response = requests.post(
                    f"{API_BASE}/chat",
                    json={"message": question},
                    timeout=120,
                )
                result = response.json()

                if response.status_code == 200:
                    answer = result["response"]
                    sources = result["sources"]
                else:
                    answer = f"Error: {result.get('details') or result.get('error', 'Unknown error')}"
                    sources = []
            except requests.RequestException as e:
                answer = f"Error: {e}"
                sources = []

        st.markdown(answer)
        render_sources(sources)

    st.session_state.messages.append(
        {"role": "assistant", "content": answer, "sources": sources}
    )
