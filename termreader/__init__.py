"""termreader - Pagination engine and terminal reader for plain text."""

from .model import Position, DisplaySpan, TextViewport
from .file_buffer import WindowedFileBuffer
from .linebreaks import LineBreakIndex
from .paginator import Paginator
from .word_paginator import WordPaginator, WordTooWideError
from .progress import Progress, ProgressSnapshot
from .view import ReaderView

__all__ = [
    'Position',
    'DisplaySpan',
    'TextViewport',
    'WindowedFileBuffer',
    'LineBreakIndex',
    'Paginator',
    'WordPaginator',
    'WordTooWideError',
    'Progress',
    'ProgressSnapshot',
    'ReaderView',
]
