"""File-level driver: reads the CSV, runs the pipeline, writes NDJSON."""

import errno
import logging
import os
import tempfile

from slowlog_converter.config import ConverterConfig
from slowlog_converter.errors import InputError
from slowlog_converter.pipeline import process_rows
from slowlog_converter.reader import CsvRowReader
from slowlog_converter.stats import ConversionStats

logger = logging.getLogger(__name__)


def _check_output_path(path: str) -> None:
    """Fail before any row is read if *path* cannot become the output file."""
    if os.path.isdir(path):
        raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
    if os.path.exists(path) and not os.access(path, os.W_OK):
        raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), path)


def _created_file_mode() -> int:
    """Mode a newly created file gets under the current umask (0666 & ~umask)."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def convert_file(config: ConverterConfig) -> ConversionStats:
    """Convert ``config.input_path`` into NDJSON at ``config.output_path``.

    Rows that fail any stage are logged and skipped. The output is written
    to a temporary file beside the destination and moved into place once
    every row has been processed, with the permissions a plain create
    would have given it.

    Raises:
        InputError: The input cannot be opened or has no header row.
        OSError: The output file cannot be created or written.
    """
    try:
        src = open(config.input_path, "r", encoding=config.encoding,
                   errors="replace", newline="")
    except OSError as exc:
        raise InputError(f"cannot open input file {config.input_path}: {exc}") from exc

    stats = ConversionStats()
    with src:
        _check_output_path(config.output_path)
        out_dir = os.path.dirname(os.path.abspath(config.output_path))
        fd, tmp = tempfile.mkstemp(dir=out_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as out:
                reader = CsvRowReader(src, config.delimiter, config.field_size_limit)
                header = reader.read_header()
                logger.info("CSV header: %s", header)

                for result in process_rows(reader, config.min_fields):
                    stats.record(result)
                    if result.ok:
                        out.write(result.line)
                        out.write("\n")
                    else:
                        logger.warning(
                            "Skipping line %d (%s): %s",
                            result.line_number, result.error.stage, result.error,
                        )
            os.chmod(tmp, _created_file_mode())
            os.replace(tmp, config.output_path)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    logger.info(
        "Conversion complete: %d of %d records written to %s",
        stats.records_written, stats.rows_read, config.output_path,
    )
    return stats
