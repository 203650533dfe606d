"""hive-table-writer test suite.

- test_table_def.py: octal delimiters, CREATE TABLE / LOAD DATA rendering, column mapping
- test_paths.py: warehouse paths, qualification, HDFS port repair
- test_hive_types.py: SQL type codes and the Hive type mapping
- test_schema.py: static, YAML and ODBC schema providers
- test_options.py: options parsing, delimiter escapes, env expansion
- test_cli.py: command line entry point and script rendering
"""
