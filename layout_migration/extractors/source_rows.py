import csv
import json
import re


def _parse_reference_field(field_value):
    """Parse a multi-value reference field into a list of field items.

    The CSV export writes the paragraph ids of a field separated by commas
    or pipes, e.g. ``"12|13|20"``.  Each id becomes an item ``{"value": id}``
    in field order.  Numeric ids are converted to ``int``.

    Args:
        field_value (str): The raw field value.

    Returns:
        list: The field items, empty if the field is empty.
    """
    if not field_value:
        return []
    items = []
    for part in re.split(r'[,|]', str(field_value)):
        part = part.strip()
        if not part:
            continue
        items.append({'value': int(part) if part.isdigit() else part})
    return items


def extract_rows_from_csv(file_path, source_field):
    """Extract source rows from a CSV export of legacy nodes.

    Every column is copied as-is except ``source_field``, which is parsed
    into field items with :func:`_parse_reference_field`.

    Args:
        file_path (str): Path to the CSV file.
        source_field (str): The column holding paragraph references.

    Returns:
        list: One dictionary per node.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a row cannot be processed.
    """
    rows = []
    with open(file_path, mode='r', encoding='utf-8') as csvfile:
        reader = csv.DictReader(csvfile)
        for row_num, raw in enumerate(reader, start=2):  # Start at 2 because header is row 1
            try:
                row = dict(raw)
                row[source_field] = _parse_reference_field(raw.get(source_field, ''))
                if (row.get('nid') or '').isdigit():
                    row['nid'] = int(row['nid'])
                rows.append(row)
            except Exception as e:
                raise ValueError(f"Error processing row {row_num} in {file_path}: {e}") from e
    return rows


def extract_rows_from_jsonl(file_path):
    """Extract source rows from a JSON Lines export, one node per line.

    Blank lines are skipped.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line is not valid JSON.
    """
    rows = []
    with open(file_path, mode='r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValueError(f"Error processing line {line_num} in {file_path}: {e}") from e
    return rows
