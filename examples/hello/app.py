"""Hello World -- the simplest tagweave example.

Build a template with the explicit ``(strings, *values)`` form and render
it. Interpolated values are HTML-escaped; nested templates are not.

Run:
    python app.py
"""

from tagweave import html, render


def greeting(name: str):
    return html(("<h1>Hello, ", "!</h1>"), name)


# Plain value, escaped once
output = render(greeting("World"))

# Untrusted input stays inert
output_escaped = render(greeting("<script>alert(1)</script>"))

# Nested templates compose without double escaping
page = html(("<main>", "</main>"), greeting("Tom & Jerry"))
output_nested = render(page)


def main() -> None:
    print(output)
    print(output_escaped)
    print(output_nested)


if __name__ == "__main__":
    main()
