"""
Duplicate layout finder.
Scans a directory of saved puzzles and groups files with the same identity hash.
"""
import json
import os
import sys
from collections import defaultdict

# Add src to path
sys.path.append(os.path.abspath("src"))
from codec import CodecError, identity_hash
from main import load_game


def find_duplicates(folder: str):
    groups = defaultdict(list)
    failed = []
    for name in sorted(os.listdir(folder)):
        if not name.endswith(".json"):
            continue
        path = os.path.join(folder, name)
        try:
            groups[identity_hash(load_game(path))].append(name)
        except (CodecError, ValueError, KeyError, json.JSONDecodeError) as e:
            failed.append((name, str(e)))
    return groups, failed


def run(folder: str = "puzzles"):
    if not os.path.isdir(folder):
        print(f"Folder '{folder}' not found.")
        return

    groups, failed = find_duplicates(folder)
    total = sum(len(names) for names in groups.values())
    print(f"Scanned {total} layouts, {len(groups)} unique.")
    print("-" * 30)
    for digest, names in groups.items():
        if len(names) > 1:
            print(f"{digest}: {', '.join(names)}")
    for name, err in failed:
        print(f"  [!] {name}: {err}")


if __name__ == "__main__":
    run(sys.argv[1] if len(sys.argv) > 1 else "puzzles")
