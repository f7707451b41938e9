"""Streaming output -- one chunk per leaf with iter_chunks().

A resolved template flattens into a lazy sequence of text chunks, ready
for chunked HTTP transfer without building the whole document in memory.

Run:
    python app.py
"""

from tagweave import html, iter_chunks

sections = [
    {"name": "Revenue", "value": "$1.2M", "trend": "up"},
    {"name": "Users", "value": "45,000", "trend": "up"},
    {"name": "Churn", "value": "2.1%", "trend": "down"},
]


def section(item: dict):
    return html(
        ('<tr class="', '"><td>', "</td><td>", "</td></tr>"),
        item["trend"],
        item["name"],
        item["value"],
    )


report = html(
    ("<h1>", "</h1><table>", "</table>"),
    "Quarterly Report",
    [section(item) for item in sections],
)

# Collect chunks for testing
chunks = list(iter_chunks(report))
output = "".join(chunks)


def main() -> None:
    print(f"Streaming {len(chunks)} chunks:\n")
    for i, chunk in enumerate(iter_chunks(report)):
        print(f"[chunk {i}] {chunk!r}")
    print(f"\n--- Full output ({len(chunks)} chunks) ---\n")
    print(output)


if __name__ == "__main__":
    main()
