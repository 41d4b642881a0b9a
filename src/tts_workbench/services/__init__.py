"""
TTS Workbench Services Module

Collaborators around the editing core:
- SynthesisClient: HTTP synthesis backend with retry
- text_input: Text/CSV/xlsx parsing and sentence splitting
- synthesize_batch: Entries -> groups of decoded segments
- export_archive / export_directory: Merged group audio output
"""
from .synthesis import SynthesisClient, SynthesisParams
from .text_input import TextEntry, parse_csv, parse_text_lines, parse_xlsx, split_sentences
from .batch import synthesize_batch, synthesize_segment
from .export import export_archive, export_directory, iter_export_files

__all__ = [
    'SynthesisClient',
    'SynthesisParams',
    'TextEntry',
    'parse_csv',
    'parse_text_lines',
    'parse_xlsx',
    'split_sentences',
    'synthesize_batch',
    'synthesize_segment',
    'export_archive',
    'export_directory',
    'iter_export_files',
]
