import logging
from pathlib import Path
from typing import Iterator, Optional, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

INT64_MAX = np.iinfo(np.int64).max


class SequenceLoader:
    """
    Loads integer sequences from delimited text files for majority analysis.

    Without a column name the file is read headerless and its first column is
    used, so a plain one-value-per-line file works. With a column name the
    first row is treated as the header.
    """

    def __init__(
        self,
        path: Union[str, Path],
        column: Optional[str] = None,
        sep: str = ",",
    ):
        """
        Initialize loader.

        Args:
            path: Path to CSV or text file
            column: Header name of the column holding the sequence
            sep: Field delimiter
        """
        self.path = Path(path)
        self.column = column
        self.sep = sep

    def _read_options(self) -> dict:
        options = {"sep": self.sep, "skipinitialspace": True}
        if self.column is None:
            options["header"] = None
            options["usecols"] = [0]
        else:
            options["usecols"] = [self.column]
        return options

    def _column_values(self, frame: pd.DataFrame, offset: int = 0) -> np.ndarray:
        """
        Extract the sequence column as int64 values.

        Args:
            frame: Frame (or chunk) read from the file
            offset: Row number of the frame's first row within the file

        Returns:
            One-dimensional int64 array
        """
        series = frame.iloc[:, 0]

        missing = series.isna().to_numpy()
        if missing.any():
            first_row = offset + int(np.flatnonzero(missing)[0])
            raise ValueError(
                f"Missing value in {self.path.name} at data row {first_row}"
            )

        if pd.api.types.is_signed_integer_dtype(series):
            return series.to_numpy(dtype=np.int64)

        if pd.api.types.is_unsigned_integer_dtype(series):
            self._check_int64_range(series, series > INT64_MAX, offset)
            return series.to_numpy(dtype=np.int64)

        numeric = pd.to_numeric(series, errors="coerce")
        integral = numeric.notna() & (numeric == numeric.round())
        if not integral.all():
            bad_row = offset + int(np.flatnonzero(~integral.to_numpy())[0])
            raise ValueError(
                f"Non-integer value {series.iloc[bad_row - offset]!r} in "
                f"{self.path.name} at data row {bad_row}"
            )
        # float64 holds both int64 bounds exactly: -2**63 and 2**63
        self._check_int64_range(
            series, (numeric < -(2.0**63)) | (numeric >= 2.0**63), offset
        )
        return numeric.to_numpy(dtype=np.int64)

    def _check_int64_range(
        self, series: pd.Series, out_of_range: pd.Series, offset: int
    ):
        """Reject values that would wrap around when stored as int64."""
        flags = out_of_range.to_numpy()
        if flags.any():
            position = int(np.flatnonzero(flags)[0])
            raise ValueError(
                f"Value {series.iloc[position]!r} in {self.path.name} at data row "
                f"{offset + position} does not fit in a 64-bit integer"
            )

    def load(self) -> np.ndarray:
        """
        Load the whole sequence into memory.

        Returns:
            One-dimensional int64 array
        """
        logger.info(f"Loading sequence from: {self.path}")

        try:
            frame = pd.read_csv(self.path, **self._read_options())
        except pd.errors.EmptyDataError:
            logger.warning(f"{self.path.name} is empty")
            return np.empty(0, dtype=np.int64)

        values = self._column_values(frame)
        logger.info(f"Loaded {len(values)} values")
        return values

    def iter_chunks(self, chunksize: int) -> Iterator[np.ndarray]:
        """
        Stream the sequence in fixed-size batches.

        Args:
            chunksize: Number of rows per batch

        Yields:
            One-dimensional int64 arrays
        """
        if chunksize < 1:
            raise ValueError(f"chunksize must be positive, got {chunksize}")

        logger.info(f"Streaming sequence from: {self.path} ({chunksize} rows per chunk)")

        try:
            reader = pd.read_csv(self.path, chunksize=chunksize, **self._read_options())
        except pd.errors.EmptyDataError:
            logger.warning(f"{self.path.name} is empty")
            return

        offset = 0
        with reader:
            for frame in reader:
                yield self._column_values(frame, offset)
                offset += len(frame)
