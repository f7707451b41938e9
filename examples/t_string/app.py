"""t-string templates -- html(t"...") (Python 3.14+).

On Python 3.14+ the tag constructors accept PEP 750 template strings
directly. Conversions and format specs apply to plain values.

Run:
    python app.py
"""

from tagweave import html, json, render

name = "World"
output = render(html(t"Hello {name}!"))

# Auto-escaping for HTML safety
user_input = "<script>alert(1)</script>"
output_escaped = render(html(t"<p>User said: {user_input}</p>"))

# Format specs apply before escaping
price = 3.14159
output_formatted = render(html(t"<span>{price:.2f}</span>"))

# Same template with the explicit form (works on any Python)
explicit_equivalent = render(html(("Hello ", "!"), name))

# JSON context
output_json = render(json(t'{{"name": {name}}}'))


def main() -> None:
    print('=== html(t"...") ===')
    print(output)
    print()
    print("=== Auto-escaping ===")
    print(output_escaped)
    print()
    print("=== Format spec ===")
    print(output_formatted)
    print()
    print("=== JSON ===")
    print(output_json)
    print(f"Same output as explicit form: {output == explicit_equivalent}")


if __name__ == "__main__":
    main()
