"""Pure catalog algorithms: spreadsheet parsing, bulk pricing, search and price quotes."""
