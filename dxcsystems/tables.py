"""
Reading sequence matrices and writing diagrams as delimited text tables.
"""

import sys
import pandas as pd
from pathlib import Path
from typing import Optional, Union

from .diagram.core import Diagram

SEPARATORS = {
    't': '\t',
    's': ' ',
    'c': ',',
}


def separator_from_code(code: str) -> str:
    """
    Map a separator code to the separator character.

    Parameters
    ----------
    code : str
        't' (TAB), 's' (space) or 'c' (comma); anything else means TAB

    Returns
    -------
    str
        Separator character
    """
    return SEPARATORS.get(code[:1] if code else 't', '\t')


def load_sequences(path: Optional[Union[str, Path]] = None,
                   separator: str = '\t') -> pd.DataFrame:
    """
    Load a rectangular table of sequences, one sequence per column.

    Parameters
    ----------
    path : str, Path or None
        Input file; None reads standard input
    separator : str, default '\\t'
        Column separator; a space separator accepts runs of whitespace

    Returns
    -------
    pd.DataFrame
        Numeric table of shape (N, n_sequences)

    Raises
    ------
    ValueError
        If the table is empty, ragged, non-numeric, or holds fewer than
        two sequences
    OSError
        If the file cannot be read
    """
    source = sys.stdin if path is None else path
    sep = r'\s+' if separator == ' ' else separator

    try:
        df = pd.read_csv(source, sep=sep, header=None, comment='#', skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        raise ValueError("No data found in input")
    except pd.errors.ParserError as e:
        raise ValueError(f"Inconsistent sequence sizes found: {e}")

    # Trailing separators produce empty columns
    df = df.dropna(axis=1, how='all')
    df = df.apply(pd.to_numeric, errors='coerce')

    if df.empty:
        raise ValueError("No data found in input")
    if df.isna().any().any():
        raise ValueError("Inconsistent sequence sizes or non-numeric values found")
    if df.shape[1] < 2:
        raise ValueError("Only one sequence detected; at least two are needed")

    df.columns = range(df.shape[1])
    return df.astype(float)


def save_diagram(diagram: Diagram,
                 path: Optional[Union[str, Path]] = None,
                 separator: str = '\t') -> None:
    """
    Write a diagram as a delimited table without header or index.

    Parameters
    ----------
    diagram : Diagram
        Correlation or p-value diagram
    path : str, Path or None
        Output file; None writes to standard output
    separator : str, default '\\t'
        Column separator
    """
    target = sys.stdout if path is None else path
    diagram.to_frame().to_csv(target, sep=separator, header=False,
                              index=False, float_format='%g')
