from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """One row of a file manifest."""

    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="FilePath")
    file_name: str = Field(alias="FileName")
    extension: str = Field(alias="Extension")  # includes the leading dot


class StatItem(BaseModel):
    metric: str
    value: str
    description: str


class GeneralStats(BaseModel):
    line_count: int = 0
    non_empty_line_count: int = 0
    empty_line_count: int = 0
    comment_count: int = 0
    char_count: int = 0  # line terminators excluded
    word_count: int = 0
    unique_word_count: int = 0
    longest_line_length: int = 0
    shortest_line_length: int = 0  # shortest non-empty line
    avg_line_length: float = 0.0
    file_size_kb: float = 0.0
    encoding: str = "utf-8"
    reading_time_min: float = 0.0


class FileStats(BaseModel):
    path: Path
    extension: str
    general: GeneralStats
    specific: list[StatItem] = []


class CombineResult(BaseModel):
    files_combined: int
    output_path: Path
    bytes_written: int
