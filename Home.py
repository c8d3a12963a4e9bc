import streamlit as st

st.set_page_config(layout="wide", initial_sidebar_state="expanded")

st.header("TC PBN Extractor")
st.subheader("To begin, click on Extract Boards in the left sidebar.")
st.subheader("Paste the address of a tournament published by a TC results site. Its boards, double dummy tricks and par scores are converted to PBN.")
st.subheader("Extractions run in the background. Identical requests are served from the results cache for 15 minutes; tick Force refresh to fetch again.")
st.subheader("Boards that can't be fetched are listed as errors. Tick Fill missing to keep an empty board in their place.")
st.caption("Code written in Python. UI is written in Streamlit. PBN is written with endplay. Results cache is Redis when TCPBN_REDIS_URL is set, otherwise in memory.")
