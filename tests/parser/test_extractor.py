"""Tests for declaration extraction through parser.parse()."""

import pytest
from infraexplain.errors import ParseError
from infraexplain.models import ResourceDeclaration
from infraexplain.parser import parse
from infraexplain.parser.extractor import DeclarationExtractor
from infraexplain.parser.lexer import TokenType, tokenize


class TestResources:
    def test_single_resource(self):
        document = parse('resource "K" "N" { p = "v" }')
        assert document.resources == [
            ResourceDeclaration(kind="K", name="N", properties={"p": "v"})
        ]
        assert document.findings == []

    def test_property_renderings(self):
        document = parse('''
resource "aws_instance" "app" {
  ami        = "ami-123"
  count      = 3
  ebs_size   = 20.5
  monitoring = false
  zones      = ["a", "b"]
  subnet_id  = aws_subnet.main.id
}
''')
        assert document.resources[0].properties == {
            "ami": "ami-123",
            "count": "3",
            "ebs_size": "20.5",
            "monitoring": "false",
            "zones": "[a, b]",
            "subnet_id": "<unknown>",
        }

    def test_declaration_order_preserved(self):
        document = parse('''
resource "a" "first" { x = 1 }
resource "b" "second" { x = 1 }
resource "c" "third" { x = 1 }
''')
        assert [r.name for r in document.resources] == ["first", "second", "third"]

    def test_identifier_labels(self):
        document = parse('resource aws_s3_bucket logs { acl = "private" }')
        assert document.resources[0].kind == "aws_s3_bucket"
        assert document.resources[0].name == "logs"

    def test_single_label_resource_skipped(self):
        document = parse('''
resource "aws_s3_bucket" {
  bucket = "x"
}
resource "aws_s3_bucket" "kept" {
  bucket = "y"
}
''')
        assert [r.name for r in document.resources] == ["kept"]

    def test_three_label_resource_skipped(self):
        document = parse('resource "a" "b" "c" { x = 1 }')
        assert document.resources == []

    def test_empty_name_skipped(self):
        document = parse('resource "aws_s3_bucket" "" { x = 1 }')
        assert document.resources == []

    def test_nested_blocks_not_flattened(self):
        document = parse('''
resource "aws_security_group" "web" {
  name = "web"
  ingress {
    cidr_blocks = ["0.0.0.0/0"]
    nested { deep = 1 }
  }
  dynamic "egress" {
    content { port = 1 }
  }
  description = "after nested blocks"
}
''')
        assert document.resources[0].properties == {
            "name": "web",
            "description": "after nested blocks",
        }

    def test_object_value_does_not_end_block(self):
        document = parse('''
resource "aws_instance" "app" {
  tags = {
    Name = "app"
  }
  ami = "ami-1"
}
''')
        props = document.resources[0].properties
        assert props["tags"] == "<unknown>"
        assert props["ami"] == "ami-1"

    def test_deeply_nested_list_only_loses_that_property(self):
        deep = "[" * 3000 + "]" * 3000
        document = parse(f'resource "a" "b" {{\n  p = {deep}\n  q = "kept"\n}}\nvariable "v" {{}}\n')
        assert document.resources[0].properties == {"p": "<unknown>", "q": "kept"}
        assert document.variables == ["v"]

    def test_duplicate_attribute_first_wins(self):
        document = parse('resource "a" "b" {\n  x = 1\n  x = 2\n}')
        assert document.resources[0].properties == {"x": "1"}

    def test_malformed_assignment_skipped(self):
        document = parse('''
resource "a" "b" {
  x =
  = 5
  y = "ok"
}
''')
        props = document.resources[0].properties
        assert props["x"] == "<unknown>"
        assert props["y"] == "ok"


class TestBlockBoundaries:
    def test_braces_in_string_do_not_close_block(self):
        document = parse('''
resource "aws_instance" "app" {
  user_data = "echo } { }}"
  ami       = "ami-1"
}
resource "aws_s3_bucket" "after" {
  bucket = "b"
}
''')
        assert [r.name for r in document.resources] == ["app", "after"]
        assert document.resources[0].properties == {
            "user_data": "echo } { }}",
            "ami": "ami-1",
        }

    def test_escaped_quotes_do_not_end_string(self):
        document = parse(r'''
resource "aws_instance" "app" {
  description = "a \"quoted } brace\" here"
  ami         = "ami-1"
}
''')
        props = document.resources[0].properties
        assert props["description"] == 'a "quoted } brace" here'
        assert props["ami"] == "ami-1"

    def test_braces_in_comments_ignored(self):
        document = parse('''
resource "a" "b" {
  # } this is not the end
  x = 1 // }
  /* } */
  y = 2
}
''')
        assert document.resources[0].properties == {"x": "1", "y": "2"}

    def test_heredoc_braces_ignored(self):
        document = parse('''
resource "aws_iam_role" "r" {
  assume_role_policy = <<EOF
{"Statement": [{"Action": "*"}]}
EOF
  name = "r"
}
''')
        props = document.resources[0].properties
        assert '"Action": "*"' in props["assume_role_policy"]
        assert props["name"] == "r"

    def test_unclosed_block_runs_to_end(self):
        document = parse('resource "a" "b" {\n  x = 1\n  y = "two"\n')
        assert document.resources[0].properties == {"x": "1", "y": "two"}

    def test_find_block_end_returns_length_when_unclosed(self):
        tokens = tokenize('a { b { }')
        extractor = DeclarationExtractor(tokens)
        open_index = next(i for i, t in enumerate(tokens) if t.type == TokenType.LBRACE)
        assert extractor.find_block_end(open_index) == len(tokens)


class TestVariablesAndOutputs:
    def test_collects_names_in_order(self, web_stack_text):
        document = parse(web_stack_text)
        assert document.variables == ["region", "instance_count"]
        assert document.outputs == ["app_ip", "bucket"]

    def test_other_blocks_ignored(self, web_stack_text):
        document = parse(web_stack_text)
        kinds = [r.kind for r in document.resources]
        assert "aws" not in kinds
        assert len(document.resources) == 4

    def test_variable_without_name_skipped(self):
        document = parse('variable {\n}\nvariable "ok" {}\n')
        assert document.variables == ["ok"]

    def test_top_level_attributes_ignored(self):
        document = parse('region = "us-east-1"\noutput "o" { value = 1 }')
        assert document.outputs == ["o"]
        assert document.resources == []


class TestParseContract:
    @pytest.mark.parametrize("text", ["", "\n\n", "# only a comment\n", "locals {\n  a = 1\n}\n"])
    def test_declaration_free_input(self, text):
        document = parse(text)
        assert document.resources == []
        assert document.variables == []
        assert document.outputs == []
        assert document.findings == []

    def test_bytes_input(self):
        document = parse(b'resource "a" "b" { x = "y" }')
        assert document.resources[0].properties == {"x": "y"}

    def test_byte_order_mark_stripped(self):
        document = parse('\ufeffvariable "v" {}')
        assert document.variables == ["v"]

    def test_invalid_utf8(self):
        with pytest.raises(ParseError):
            parse(b'\xff\xfe resource')

    def test_lexical_failure_raises(self):
        with pytest.raises(ParseError):
            parse('resource "a" "b" {\n  x = "unterminated\n}')

    def test_parse_is_pure(self, web_stack_text):
        assert parse(web_stack_text) == parse(web_stack_text)
