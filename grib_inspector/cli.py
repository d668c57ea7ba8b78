import argparse
import json
import logging
import sys

from grib_inspector.config import (
    ARRAY_PREVIEW_LENGTH, DEFAULT_NAME_KEY, MULTI_FIELD_SUPPORT, NAME_KEYS, LOG_LEVEL, LOG_FILE, configure_logging
)
from grib_inspector.models.values import Array
from grib_inspector.services.grib_metadata_service import GribMetadataService
from grib_inspector.utils.errors import GribInspectorError

logger = logging.getLogger(__name__)


def _printable(record, full_arrays=False):
    out = {}
    for key, value in record.items():
        if isinstance(value, Array) and not full_arrays and len(value) > ARRAY_PREVIEW_LENGTH:
            preview = value.value.ravel()[:ARRAY_PREVIEW_LENGTH].tolist()
            out[key] = {"shape": list(value.shape), "first": preview}
        else:
            out[key] = value.to_python()
    return out


def _dump(obj):
    print(json.dumps(obj, indent=2, default=str))


def cmd_inventory(service, args):
    for line in service.inventory(args.grib_file, multi_field_support=args.multi_field):
        print(line)


def cmd_record(service, args):
    record = service.get_record(
        args.grib_file,
        index=args.index,
        record_count=args.record_count,
        structured=args.structured,
        multi_field_support=args.multi_field,
    )
    _dump(_printable(record, args.full_arrays))


def cmd_names(service, args):
    names = service.get_parameter_names(args.grib_file, name_key=args.name_key, multi_field_support=args.multi_field)
    for entry in names:
        print(f"{entry.message_index:>4} : {entry.text}")


def cmd_parameter(service, args):
    result = service.get_parameter(
        args.grib_file,
        args.parameter_name,
        name_key=args.name_key,
        structured=args.structured,
        multi_field_support=args.multi_field,
    )
    if not result.found:
        print(f"Parameter '{args.parameter_name}' not found")
        return
    _dump([
        {"message": index, "record": _printable(record, args.full_arrays)}
        for index, record in zip(result.message_indices, result.records)
    ])


def cmd_serve(service, args):
    import uvicorn
    uvicorn.run("grib_inspector.main:app", host=args.host, port=args.port)


def build_parser():
    parser = argparse.ArgumentParser(prog='grib-inspector', description='Inventory GRIB files and extract message metadata.')
    parser.add_argument('--multi-field', action='store_true', default=MULTI_FIELD_SUPPORT,
                        help='Enable multi-field message support')
    parser.add_argument('--log-level', default=LOG_LEVEL, help=f'Logging level (default: {LOG_LEVEL})')
    parser.add_argument('--log-file', default=LOG_FILE, help='Log file path; empty disables file logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    p = subparsers.add_parser('inventory', help='Print one line per message')
    p.add_argument('grib_file', help='Path to the GRIB file.')
    p.set_defaults(func=cmd_inventory)

    p = subparsers.add_parser('record', help='Print every key of one message as JSON')
    p.add_argument('grib_file', help='Path to the GRIB file.')
    p.add_argument('--index', type=int, default=1, help='1-based message number (default: 1)')
    p.add_argument('--record-count', type=int, default=None, help='Known message count of the file')
    p.add_argument('--structured', action='store_true', help='Drop case-insensitive duplicate keys')
    p.add_argument('--full-arrays', action='store_true', help='Print arrays in full')
    p.set_defaults(func=cmd_record)

    p = subparsers.add_parser('names', help='Print the parameter name of every message')
    p.add_argument('grib_file', help='Path to the GRIB file.')
    p.add_argument('--name-key', choices=NAME_KEYS, default=DEFAULT_NAME_KEY,
                   help=f'Key naming the parameter (default: {DEFAULT_NAME_KEY})')
    p.set_defaults(func=cmd_names)

    p = subparsers.add_parser('parameter', help='Print the records of every message carrying a parameter')
    p.add_argument('grib_file', help='Path to the GRIB file.')
    p.add_argument('parameter_name', help='Exact parameter name to look for')
    p.add_argument('--name-key', choices=NAME_KEYS, default=DEFAULT_NAME_KEY,
                   help=f'Key naming the parameter (default: {DEFAULT_NAME_KEY})')
    p.add_argument('--structured', action='store_true', help='Drop case-insensitive duplicate keys')
    p.add_argument('--full-arrays', action='store_true', help='Print arrays in full')
    p.set_defaults(func=cmd_parameter)

    p = subparsers.add_parser('serve', help='Run the HTTP API')
    p.add_argument('--host', default='127.0.0.1')
    p.add_argument('--port', type=int, default=8000)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv=None, service=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)
    service = service or GribMetadataService()

    try:
        args.func(service, args)
    except GribInspectorError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
