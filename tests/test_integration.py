import os
import shutil
import tempfile

import pytest

pytest.importorskip("grpc_tools")

from proto2gql.errors import ProtocError, UnsupportedSyntaxError
from proto2gql.main import main, run
from proto2gql.parser.descriptor_loader import load_tree


USER_PROTO = """\
syntax = "proto3";

package example;

import "google/protobuf/wrappers.proto";
import "google/protobuf/empty.proto";

enum Status {
    STATUS_UNKNOWN = 0;
    ACTIVE = 1;
}

message User {
    string name = 1;
    int32 age = 2;
    repeated string tags = 3;
    map<string, int64> scores = 4;
    Status status = 5;
    google.protobuf.StringValue nickname = 6;

    oneof contact {
        string email = 7;
        int64 phone = 8;
    }
}

message Profile {
    google.protobuf.StringValue bio = 1;
    User owner = 2;
}

message GetUserRequest {
    string name = 1;
}

service UserService {
    rpc GetUser (GetUserRequest) returns (User);
    rpc DeleteUser (GetUserRequest) returns (google.protobuf.Empty);
    rpc ArchiveUser (GetUserRequest) returns (User);
}
"""

LEGACY_PROTO = """\
syntax = "proto2";

package legacy;

message Old {
    optional string name = 1;
}
"""

COMMON_PROTO = """\
syntax = "proto3";

package common;

message Money {
    int64 units = 1;
}

service Billing {
    rpc GetMoney (Money) returns (Money);
}
"""

ORDER_PROTO = """\
syntax = "proto3";

package shop;

import "common/money.proto";

message Order {
    common.Money total = 1;
    Item item = 2;

    message Item {
        string sku = 1;
    }
}

message Cart {
    Item item = 1;

    message Item {
        int32 qty = 1;
    }
}
"""


class TestEndToEnd:
    def setup_method(self):
        self.work_dir = tempfile.mkdtemp()
        self.in_dir = os.path.join(self.work_dir, "protos")
        self.out_dir = os.path.join(self.work_dir, "out")
        os.makedirs(self.in_dir)

    def teardown_method(self):
        shutil.rmtree(self.work_dir)

    def _write(self, rel_path, content):
        path = os.path.join(self.in_dir, rel_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
        return path

    def _read(self, name):
        with open(os.path.join(self.out_dir, name), encoding="utf-8") as f:
            return f.read()

    def test_user_service(self):
        self._write("user.proto", USER_PROTO)

        assert main([self.in_dir, self.out_dir]) == 0

        content = self._read("user.graphql")
        assert content.count("type StringValue { value: String }") == 1
        assert content.count("type Empty {}") == 1
        assert "enum Status {\n\tSTATUS_UNKNOWN\n\tACTIVE\n}" in content
        assert "type User {\n\tname: String\n\tage: Int\n\ttags: [String]\n\tscores: JSON\n" in content
        assert "\tnickname: StringValue\n" in content
        assert "\t# oneof contact: email, phone\n\tcontact: String | Int\n" in content
        assert "input UserInput {" in content
        assert "\tbio: StringValue\n\towner: User\n" in content
        assert "ScoresEntry" not in content
        assert "type Query {\n  GetUser(GetUserRequest: GetUserRequest): User\n}" in content
        assert (
            "type Mutation {\n"
            "  DeleteUser(GetUserRequest: GetUserRequest): Empty\n"
            "  ArchiveUser(GetUserRequest: GetUserRequest): User\n"
            "}" in content
        )
        assert content.endswith("}\n")

    def test_declarations_keep_source_order(self):
        self._write("user.proto", USER_PROTO)

        run(self.in_dir, self.out_dir)

        content = self._read("user.graphql")
        assert (
            content.index("enum Status")
            < content.index("type User {")
            < content.index("type Profile {")
            < content.index("type Query {")
        )

    def test_proto2_aborts(self, capsys):
        self._write("legacy.proto", LEGACY_PROTO)

        assert main([self.in_dir, self.out_dir]) == 1
        assert not os.path.exists(self.out_dir)
        assert capsys.readouterr().err == "Invalid Protobuf version detected, currently only proto3 is supported.\n"

    def test_proto2_raises_from_run(self):
        self._write("legacy.proto", LEGACY_PROTO)

        with pytest.raises(UnsupportedSyntaxError):
            run(self.in_dir, self.out_dir)

    def test_recursive_with_imports(self):
        self._write(os.path.join("common", "money.proto"), COMMON_PROTO)
        order_path = self._write(os.path.join("shop", "order.proto"), ORDER_PROTO)

        generated = run(self.in_dir, self.out_dir, recursive=True, include_paths=[self.in_dir])

        assert sorted(os.path.basename(p) for p in generated) == ["money.graphql", "order.graphql"]
        content = self._read("order.graphql")
        assert "\ttotal: Money\n" in content
        assert order_path.endswith("order.proto")

    def test_imported_declarations_stay_in_their_own_document(self):
        self._write(os.path.join("common", "money.proto"), COMMON_PROTO)
        self._write(os.path.join("shop", "order.proto"), ORDER_PROTO)

        run(self.in_dir, self.out_dir, recursive=True, include_paths=[self.in_dir])

        order = self._read("order.graphql")
        assert "type Money" not in order
        assert "GetMoney" not in order
        assert "type Query" not in order
        money = self._read("money.graphql")
        assert money.count("type Money {") == 1
        assert "type Query {\n  GetMoney(Money: Money): Money\n}" in money

    def test_nested_types_are_qualified_by_parent(self):
        self._write(os.path.join("common", "money.proto"), COMMON_PROTO)
        self._write(os.path.join("shop", "order.proto"), ORDER_PROTO)

        run(self.in_dir, self.out_dir, recursive=True, include_paths=[self.in_dir])

        content = self._read("order.graphql")
        assert "type Order {\n\ttotal: Money\n\titem: Order_Item\n}" in content
        assert "type Order_Item {\n\tsku: String\n}" in content
        assert "type Cart {\n\titem: Cart_Item\n}" in content
        assert "type Cart_Item {\n\tqty: Int\n}" in content

    def test_non_recursive_ignores_subdirectories(self):
        self._write(os.path.join("common", "money.proto"), COMMON_PROTO)

        assert main([self.in_dir, self.out_dir]) == 1

    def test_load_tree(self):
        path = self._write("user.proto", USER_PROTO)

        root = load_tree(path)

        assert root.syntax == "proto3"
        names = [d.name for d in root.nested]
        # Imported files only resolve references.
        assert names == ["example"]

    def test_protoc_error(self):
        path = self._write("broken.proto", 'syntax = "proto3";\nmessage {\n')

        with pytest.raises(ProtocError):
            load_tree(path)
