import streamlit as st
import polars as pl
from st_aggrid import GridOptionsBuilder, AgGrid, ColumnsAutoSizeMode, AgGridTheme


def widen_scrollbars():
    st.markdown("""
                    <html>
                        <head>
                        <style>
                            ::-webkit-scrollbar {
                                width: 14px;
                                height: 14px;
                                }
                                ::-webkit-scrollbar-track {
                                background: #f1f1f1;
                                }
                                ::-webkit-scrollbar-thumb {
                                background: #888;
                                }
                        </style>
                        </head>
                        <body>
                        </body>
                    </html>
                """, unsafe_allow_html=True)


def ShowDataFrameTable(table_df,key=None,max_rows_shown=10):

    # AgGrid wants a pandas dataframe.
    if isinstance(table_df, pl.DataFrame):
        table_df = table_df.to_pandas()

    # todo: current code doesn't adjust for dark mode
    gb = GridOptionsBuilder.from_dataframe(table_df)
    gb.configure_default_column(cellStyle={'color': 'black', 'font-size': '12px'}, suppressMenu=True, wrapHeaderText=True, autoHeaderHeight=True)
    gridOptions = gb.build()
    custom_css = {
        '.ag-header-cell-text': {'font-size': '12px', 'text-overflow': 'revert;', 'font-weight': 700},
        '.ag-row:nth-child(odd)': {'background-color': 'white'},
        '.ag-row:nth-child(even)': {'background-color': 'whitesmoke'},
        }
    rows_to_show = max(1, min(max_rows_shown, len(table_df)))
    AgGrid(
        table_df,
        gridOptions=gridOptions,
        custom_css=custom_css,
        columns_auto_size_mode=ColumnsAutoSizeMode.FIT_CONTENTS,
        theme=AgGridTheme.BALHAM,
        # 50 for header, 42 per row, 20 in case there's a horizontal scrollbar.
        height=50+(30+10+2)*rows_to_show+20,
        key=key
        )
