import os
import tempfile
import unittest

import support  # noqa: F401

from utils.pure import (
    describe_image,
    encode_data_url,
    format_price,
    generate_markdown_table,
    parse_price,
)


class ParsePriceTestCase(unittest.TestCase):
    def test_leading_integer(self):
        self.assertEqual(parse_price("1200"), 1200)
        self.assertEqual(parse_price("  75 rupees"), 75)
        self.assertEqual(parse_price("12.9"), 12)
        self.assertEqual(parse_price("-5"), -5)

    def test_unparseable_is_zero(self):
        for value in ("abc", "", None, "₹100", True):
            self.assertEqual(parse_price(value), 0, value)

    def test_int_passthrough(self):
        self.assertEqual(parse_price(850), 850)

    def test_format(self):
        self.assertEqual(format_price("999"), "₹999")
        self.assertEqual(format_price("n/a"), "₹0")


class MarkdownTableTestCase(unittest.TestCase):
    def test_table(self):
        table = generate_markdown_table(
            ["Name", "Price"], [["Ring", "₹500"], ["A|B", "₹1"]], ["l", "r"]
        )
        self.assertEqual(
            table.splitlines(),
            [
                "| Name | Price |",
                "| :--- | ---: |",
                "| Ring | ₹500 |",
                "| A\\|B | ₹1 |",
            ],
        )

    def test_first_row_as_headers(self):
        table = generate_markdown_table(None, [["a", "b"], ["1", "2"]])
        self.assertTrue(table.startswith("| a | b |"))

    def test_empty(self):
        self.assertEqual(generate_markdown_table(None, []), "")

    def test_bad_aligns(self):
        with self.assertRaises(ValueError):
            generate_markdown_table(["a", "b"], [], ["l"])


class ImageTestCase(unittest.TestCase):
    def test_encode_data_url(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "piece.png")
            with open(path, "wb") as f:
                f.write(b"abc")
            self.assertEqual(encode_data_url(path), "data:image/png;base64,YWJj")

    def test_describe_image(self):
        url = "https://example.com/a.png"
        self.assertEqual(describe_image(url), url)
        self.assertTrue(
            describe_image("data:image/png;base64,YWJj").startswith("uploaded image/png")
        )


if __name__ == "__main__":
    unittest.main()
