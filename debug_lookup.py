import sys
from datetime import datetime

from config import init_logging, load_config
from errors import AnsError
from tld_parser import Record, TldParser

USAGE = "usage: python debug_lookup.py <domain> [record]"


def format_expiry(expires_at):
    if expires_at is None:
        return "never"
    return datetime.fromtimestamp(expires_at).strftime("%Y-%m-%d %H:%M")


def debug_lookup(parser, name, record=None):
    if record:
        value = parser.get_record(name, Record(record))
        print(f"✅ {record}.{name} -> {value}")
        return

    lookup = parser.get_name_record(name)
    print(f"✅ {lookup.resolved.domain} -> {lookup.resolved.name_account}")
    print(f"  parent:  {lookup.record.parent_name}")
    print(f"  owner:   {lookup.record.owner}")
    print(f"  class:   {lookup.record.name_class}")
    print(f"  role:    {lookup.role}")
    print(f"  expires: {format_expiry(lookup.record.expires_at)}")
    if lookup.validity.is_expired:
        print("  ⚠️ expired, no effective owner")
    else:
        print(f"  effective owner: {lookup.owner}")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv or len(argv) > 2:
        print(USAGE)
        return 2

    config = load_config()
    init_logging(config.log_level)
    parser = TldParser(config=config)
    name = argv[0]
    record = argv[1] if len(argv) > 1 else None
    try:
        debug_lookup(parser, name, record)
    except AnsError as e:
        print(f"❌ {name} failed to resolve: {e}")
        return 1
    except ValueError as e:
        # unknown record name
        print(f"❌ {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
