"""
Tests for CSV export
"""
from parsers import TableData, decode
from services.csv_export import escape_csv_value, export_csv, to_csv


class TestEscapeCSVValue:

    def test_comma_and_quotes(self):
        assert escape_csv_value('He said, "hi"') == '"He said, ""hi"""'

    def test_quote_only(self):
        assert escape_csv_value('a "b"') == '"a ""b"""'

    def test_comma_only(self):
        assert escape_csv_value('a,b') == '"a,b"'

    def test_plain_text(self):
        assert escape_csv_value('Longsword') == 'Longsword'

    def test_newline_not_quoted(self):
        assert escape_csv_value('two\nlines') == 'two\nlines'

    def test_numbers(self):
        assert escape_csv_value(12.0) == '12'
        assert escape_csv_value(12.5) == '12.5'
        assert escape_csv_value(-3.0) == '-3'
        assert escape_csv_value(7) == '7'

    def test_exponent_form(self):
        table = decode('2DA V2.0\n\nScale\n1 0.0000001\n')
        assert to_csv(table) == 'ID,Scale\n1,1e-7'

    def test_falsy_values_are_empty(self):
        assert escape_csv_value(None) == ''
        assert escape_csv_value('') == ''
        assert escape_csv_value(0) == ''
        assert escape_csv_value(0.0) == ''


class TestToCSV:
    """Test rendering whole tables"""

    def test_scenario_table(self):
        table = decode('2DA V2.0\n\nLABEL NAME Cost\n1 "Foo" "A foo, item" 12\n2 "Bar" **** 12.5\n')
        csv_text = to_csv(table, 'items')

        assert csv_text == (
            'ID,LABEL,NAME,Cost\n'
            '1,Foo,"A foo, item",12\n'
            '2,Bar,,12.5'
        )

    def test_first_line_is_columns(self):
        table = decode('2DA V2.0\n\nA B C\n0 x y z\n')
        assert to_csv(table, 'abc').split('\n')[0] == ','.join(table.columns)

    def test_missing_fields_are_empty(self):
        table = TableData(columns=['ID', 'A', 'B'], rows=[{'id': 5, 'A': 'x'}])
        assert to_csv(table) == 'ID,A,B\n5,x,'

    def test_zero_id_renders_empty(self):
        table = TableData(columns=['ID', 'A'], rows=[{'id': 0, 'A': 'x'}])
        assert to_csv(table) == 'ID,A\n,x'

    def test_empty_table(self):
        assert to_csv(TableData(), 'empty') == ''

    def test_no_trailing_newline(self):
        table = decode('2DA V2.0\n\nA\n1 x\n2 y\n')
        assert not to_csv(table).endswith('\n')


class TestExportCSV:

    def test_writes_file(self, tmp_path):
        table = decode('2DA V2.0\n\nLABEL\n1 "Épée"\n')
        path = export_csv(table, 'weapons', tmp_path)

        assert path == tmp_path / 'weapons.csv'
        assert path.read_text(encoding='utf-8') == 'ID,LABEL\n1,Épée'
