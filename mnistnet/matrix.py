"""Dense row-major matrices of floats."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

_SHORT_ROWS = 4
_SHORT_COLUMNS = 10


class Matrix:
    """A rows x columns matrix of floats stored in row-major order."""

    __slots__ = ("rows", "columns", "_data")

    def __init__(self, rows: int, columns: int, values: Iterable[float] | None = None):
        if rows < 0 or columns < 0:
            raise ValueError(f"invalid matrix shape {rows}x{columns}")
        self.rows = rows
        self.columns = columns
        if values is None:
            self._data = [0.0] * (rows * columns)
        else:
            data = [float(v) for v in values]
            if len(data) != rows * columns:
                raise ValueError(
                    f"{len(data)} values given for a {rows}x{columns} matrix"
                )
            self._data = data

    @classmethod
    def zeros(cls, rows: int, columns: int) -> Matrix:
        """Return a matrix of the given shape filled with zeros."""
        return cls(rows, columns)

    @classmethod
    def filled(cls, rows: int, columns: int, value: float) -> Matrix:
        """Return a matrix of the given shape with every entry set to value."""
        return cls(rows, columns, [value] * (rows * columns))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix from a sequence of equally long rows."""
        if not rows:
            return cls(0, 0)
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("rows have different lengths")
        return cls(len(rows), width, (v for row in rows for v in row))

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.columns

    def _offset(self, key: tuple[int, int]) -> int:
        row, col = key
        if not (0 <= row < self.rows and 0 <= col < self.columns):
            raise IndexError(f"index ({row}, {col}) out of range for {self.rows}x{self.columns}")
        return row * self.columns + col

    def __getitem__(self, key: tuple[int, int]) -> float:
        return self._data[self._offset(key)]

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        self._data[self._offset(key)] = float(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self._data == other._data

    def __repr__(self) -> str:
        return f"Matrix.from_rows({self.to_rows()!r})"

    def _require_same_shape(self, other: Matrix) -> None:
        if self.shape != other.shape:
            raise ValueError(f"shape mismatch: {self.shape} and {other.shape}")

    def hadamard(self, other: Matrix) -> Matrix:
        """Return the element-wise product of two matrices of equal shape."""
        self._require_same_shape(other)
        return Matrix(self.rows, self.columns, (a * b for a, b in zip(self._data, other._data)))

    def __add__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_shape(other)
        return Matrix(self.rows, self.columns, (a + b for a, b in zip(self._data, other._data)))

    def __sub__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_shape(other)
        return Matrix(self.rows, self.columns, (a - b for a, b in zip(self._data, other._data)))

    def dot(self, other: Matrix) -> Matrix:
        """Return the matrix product self x other."""
        if self.columns != other.rows:
            raise ValueError(f"cannot multiply {self.shape} by {other.shape}")
        left = self.to_rows()
        right_columns = list(zip(*other.to_rows())) if other.rows else [()] * other.columns
        return Matrix(
            self.rows,
            other.columns,
            (sum(a * b for a, b in zip(row, col)) for row in left for col in right_columns),
        )

    def __matmul__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.dot(other)

    def apply(self, f: Callable[[float], float]) -> Matrix:
        """Return a matrix with f applied to every entry."""
        return Matrix(self.rows, self.columns, (f(v) for v in self._data))

    def transpose(self) -> Matrix:
        """Return the transposed matrix."""
        return Matrix(
            self.columns,
            self.rows,
            (self._data[row * self.columns + col] for col in range(self.columns) for row in range(self.rows)),
        )

    def scale(self, s: float) -> Matrix:
        """Return the matrix with every entry multiplied by s."""
        return Matrix(self.rows, self.columns, (v * s for v in self._data))

    def copy_from(self, src: Matrix) -> None:
        """Overwrite this matrix's entries with those of src, of equal shape."""
        self._require_same_shape(src)
        self._data[:] = src._data

    def to_rows(self) -> list[list[float]]:
        """Return the entries as a list of row lists."""
        return [self._data[r * self.columns:(r + 1) * self.columns] for r in range(self.rows)]

    def format(self, is_short: bool = False) -> str:
        """Render the entries with two decimals; a short view shows at most 4x10."""
        if is_short:
            lim_rows = min(self.rows, _SHORT_ROWS)
            lim_cols = min(self.columns, _SHORT_COLUMNS)
        else:
            lim_rows, lim_cols = self.rows, self.columns
        lines = []
        for row in self.to_rows()[:lim_rows]:
            line = "".join(f"{v:.2f} " for v in row[:lim_cols])
            if is_short and lim_cols != self.columns:
                line += "..."
            lines.append(line + "\n")
        if is_short and lim_rows != self.rows:
            lines.append("...\n")
        return "".join(lines)