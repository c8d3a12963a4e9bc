# todo:
# 1. offer a zip download when split produces many board sets.

import streamlit as st
import pathlib
import time
import sys
sys.path.append(str(pathlib.Path.cwd().joinpath('streamlitlib')))  # global
import streamlitlib # must be placed after sys.path.append. vscode re-format likes to move this to the top

from tcPbnLib.config import CacheConfig, ExtractorConfig
from tcPbnLib.errors import JobAlreadyProcessing, JobNotFound, JobStillProcessing
from tcPbnLib.tcPbnCacheLib import InMemoryResultsCache, RedisResultsCache
from tcPbnLib.tcPbnEndplayLib import pbn_to_df
from tcPbnLib.tcPbnServiceLib import ExtractionService, is_valid_base_url
from tcPbnLib.tcPbnTCLib import TCExtractor
from tcPbnLib.tcPbnTypes import ExtractionOptions


@st.cache_resource()
def get_extraction_service():
    cache_config = CacheConfig.from_env()
    if cache_config.redis_url:
        cache = RedisResultsCache.from_url(cache_config.redis_url, processing_ttl=cache_config.processing_ttl, result_ttl=cache_config.result_ttl)
    else:
        cache = InMemoryResultsCache(processing_ttl=cache_config.processing_ttl, result_ttl=cache_config.result_ttl)
    return ExtractionService(TCExtractor(ExtractorConfig.from_env()), cache)


st.set_page_config(layout="wide", initial_sidebar_state="expanded")
streamlitlib.widen_scrollbars()

st.header("Extract Boards to PBN")
st.sidebar.header("Settings for Extraction")

base_url = st.sidebar.text_input('Tournament URL:', value='', key='Extract-Url', help='Address of the tournament results e.g. https://example.org/tournaments/12345/').strip()
event_name = st.sidebar.text_input('Event name (empty means use the tournament name):', value='', key='Extract-Event')
boards_range = st.sidebar.text_input('Boards (empty means all):', value='', key='Extract-Boards', help='Example: 1-8,10,12-20').replace(' ', '')
split_on_discontinuation = st.sidebar.checkbox('Split when board numbering restarts', value=False, key='Extract-Split')
fill_missing = st.sidebar.checkbox('Fill missing boards with empty boards', value=False, key='Extract-Fill')
force_refresh = st.sidebar.checkbox('Force refresh', value=False, key='Extract-Force')

service = get_extraction_service()

if st.sidebar.button('Extract', key='Extract-Button'):
    if not is_valid_base_url(base_url):
        st.error(f"Invalid tournament URL: {base_url!r}")
        st.stop()
    options = ExtractionOptions(
        base_url=base_url,
        event_name=event_name,
        boards_range=boards_range,
        split_on_discontinuation=split_on_discontinuation,
        force_refresh=force_refresh,
        fill_missing=fill_missing,
    )
    try:
        st.session_state.job_key = service.queue_job(options)
    except JobAlreadyProcessing:
        st.session_state.job_key = options.hash()
        st.info("An identical extraction is already running.")

job_key = st.session_state.get('job_key')
if job_key is None:
    st.info("Enter a tournament URL and click Extract.")
    st.stop()

st.caption(f"Job: {job_key}")

with st.spinner(text="Extracting boards ..."):
    start_time = time.time()
    while True:
        try:
            result = service.get_job(job_key)
            break
        except JobStillProcessing:
            time.sleep(1)
        except JobNotFound:
            st.warning("Job has expired. Click Extract again.")
            del st.session_state.job_key
            st.stop()
    end_time = time.time()

if not result.success:
    for error in result.errors:
        st.error(str(error))
    st.stop()

st.info(f"{result.event_name}: {result.board_count} boards extracted, {len(result.errors)} errors, {len(result.board_sets)} board sets. Waited {round(end_time-start_time,2)} seconds.")

if result.errors:
    with st.expander(f"Errors ({len(result.errors)})"):
        for error in result.errors:
            st.write(str(error))

for i, board_set in enumerate(result.board_sets):
    filename = f"{result.event_name or 'boards'}.pbn" if len(result.board_sets) == 1 else f"{result.event_name or 'boards'}-{i}.pbn"
    st.download_button(f"Download {filename}", data=board_set, file_name=filename, mime='text/plain', key=f'Extract-Download-{i}')
    if board_set:
        streamlitlib.ShowDataFrameTable(pbn_to_df(board_set), key=f'Extract-Table-{i}')
