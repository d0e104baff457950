import pytest
import pcapng.blocks as blocks

from capture import BasicCaptureInterface
from extcap_cli import (
    DispatchOutcome,
    ExtcapError,
    ExtcapManager,
    ExtcapSettings,
    EXIT_MISSING_FIFO,
    EXIT_MISSING_INTERFACE,
    EXIT_NO_COMMAND,
    EXIT_OK,
    EXIT_UNKNOWN_INTERFACE,
    strip_pipe_prefix,
)
from extcap_config import ConfigField, FieldType, MissingFieldFlagError
from models import LinkLayerType, PacketToSend
from tests.conftest import decode_blocks

USAGE = "Usage: See https://www.wireshark.org/docs/wsdg_html_chunked/ChCaptureExtcap.html"


@pytest.fixture
def two_interfaces(manager, noop_producer):
    manager.register_interface("Foo Bar", noop_producer, LinkLayerType.ETHERNET)
    manager.register_interface("Baz", noop_producer, LinkLayerType.RAW)
    return manager


def test_run_without_interfaces_fails(manager):
    with pytest.raises(ExtcapError):
        manager.dispatch(["--extcap-interfaces"])

def test_dispatch_rejects_none(two_interfaces):
    with pytest.raises(TypeError):
        two_interfaces.dispatch(None)

def test_interfaces_query(two_interfaces):
    outcome = two_interfaces.dispatch(["--extcap-interfaces", "--extcap-version=4.2"])
    assert outcome == DispatchOutcome(EXIT_OK, "\n".join([
        "extcap {version=1.0.0.0}{help=http://127.0.0.1/}",
        "interface {value=ExtcapNet_FooBar}{display=Foo Bar}",
        "interface {value=ExtcapNet_Baz}{display=Baz}",
    ]))

def test_interfaces_query_uses_settings(opener, noop_producer):
    manager = ExtcapManager(ExtcapSettings(version="2.0", help_url="https://example.org/"), channel_opener=opener)
    manager.register_interface("Only", noop_producer)
    assert manager.dispatch(["--extcap-interfaces"]).output.startswith(
        "extcap {version=2.0}{help=https://example.org/}")

def test_interfaces_query_wins_over_other_commands(two_interfaces):
    outcome = two_interfaces.dispatch(["--extcap-interface", "ExtcapNet_Baz", "--extcap-dlts", "--extcap-interfaces"])
    assert outcome.exit_code == EXIT_OK
    assert outcome.output.startswith("extcap {")

@pytest.mark.parametrize("args", [
    ["--extcap-config"],
    ["--extcap-config", "--extcap-interface"],
    [],
])
def test_missing_interface_selector(two_interfaces, args):
    outcome = two_interfaces.dispatch(args)
    assert outcome.exit_code == EXIT_MISSING_INTERFACE
    assert outcome.output == "ERROR: Command is missing --extcap-interface parameter."

def test_unknown_interface(two_interfaces):
    outcome = two_interfaces.dispatch(["--extcap-interface", "ExtcapNet_Nonexistent", "--extcap-dlts"])
    assert outcome.exit_code == EXIT_UNKNOWN_INTERFACE
    assert outcome.output.split("\n") == [
        "ERROR: No interface found with the identifier 'ExtcapNet_Nonexistent'",
        USAGE,
    ]

def test_config_query(two_interfaces):
    iface = two_interfaces.find_interface("ExtcapNet_FooBar")
    iface.add_config_field(ConfigField("Host Name", FieldType.STRING))
    outcome = two_interfaces.dispatch(["--extcap-interface", "ExtcapNet_FooBar", "--extcap-config"])
    assert outcome == DispatchOutcome(
        EXIT_OK,
        "arg {number=0}{call=--extcapnet_0_hostname}{display=Host Name}{type=string}{required=True}")

def test_dlts_query(two_interfaces):
    outcome = two_interfaces.dispatch(["--extcap-interface", "ExtcapNet_Baz", "--extcap-dlts"])
    assert outcome == DispatchOutcome(EXIT_OK, "dlt {number=101}{name=RAW}{display=RAW}")

def test_config_takes_precedence_over_dlts_and_capture(two_interfaces, opener):
    outcome = two_interfaces.dispatch(
        ["--capture", "--extcap-dlts", "--extcap-config", "--extcap-interface", "ExtcapNet_Baz"])
    assert outcome == DispatchOutcome(EXIT_OK, "")
    assert opener.opened == []

def test_dlts_takes_precedence_over_capture(two_interfaces, opener):
    outcome = two_interfaces.dispatch(["--extcap-interface", "ExtcapNet_Baz", "--capture", "--extcap-dlts"])
    assert outcome.output.startswith("dlt ")
    assert opener.opened == []

@pytest.mark.parametrize("args", [
    ["--extcap-interface", "ExtcapNet_Baz", "--capture"],
    ["--extcap-interface", "ExtcapNet_Baz", "--capture", "--fifo"],
])
def test_capture_without_fifo(two_interfaces, opener, args):
    outcome = two_interfaces.dispatch(args)
    assert outcome.exit_code == EXIT_MISSING_FIFO
    assert opener.opened == []

def test_no_command(two_interfaces):
    outcome = two_interfaces.dispatch(["--extcap-interface", "ExtcapNet_Baz"])
    assert outcome == DispatchOutcome(EXIT_NO_COMMAND, USAGE)

def test_strip_pipe_prefix():
    assert strip_pipe_prefix("\\\\.\\pipe\\wireshark_extcap_1") == "wireshark_extcap_1"
    assert strip_pipe_prefix("/tmp/wireshark_extcap_1") == "/tmp/wireshark_extcap_1"

def test_capture_runs_producer(manager, opener):
    seen = {}

    def produce(configuration, publisher):
        seen["configuration"] = configuration
        publisher.send(b"\x45\x00\x00\x14", LinkLayerType.RAW)
        publisher.send_packet(PacketToSend(data=b"\x00" * 14, comment="eth"))

    iface = manager.register_interface("Cap Test", produce, LinkLayerType.ETHERNET)
    iface.add_link_layer(LinkLayerType.RAW)
    host = ConfigField("Host", FieldType.STRING)
    iface.add_config_field(host)

    outcome = manager.dispatch(["--capture", "--extcap-interface", "ExtcapNet_CapTest",
                                "--fifo", "\\\\.\\pipe\\wireshark_pipe",
                                "--extcapnet_0_host", "10.0.0.1"])

    assert outcome == DispatchOutcome(EXIT_OK, "")
    assert seen["configuration"] == {host: "10.0.0.1"}
    [(pipe_name, channel)] = opener.opened
    assert pipe_name == "wireshark_pipe"
    assert channel.closed
    packets = [b for b in decode_blocks(channel.data) if isinstance(b, blocks.EnhancedPacket)]
    assert [p.interface_id for p in packets] == [1, 0]
    assert packets[1].options["opt_comment"] == "eth"

def test_capture_passes_empty_configuration(manager, opener):
    seen = []
    manager.register_interface("Plain", lambda configuration, publisher: seen.append(configuration))
    manager.dispatch(["--extcap-interface", "ExtcapNet_Plain", "--capture", "--fifo", "/tmp/fifo"])
    assert seen == [{}]
    assert opener.opened[0][0] == "/tmp/fifo"

def test_capture_releases_channel_when_producer_fails(manager, opener):
    def produce(configuration, publisher):
        publisher.send(b"\x00" * 14)
        raise RuntimeError("producer exploded")

    manager.register_interface("Broken", produce)
    with pytest.raises(RuntimeError, match="exploded"):
        manager.dispatch(["--extcap-interface", "ExtcapNet_Broken", "--capture", "--fifo", "f"])
    assert opener.channel.closed
    assert len([b for b in decode_blocks(opener.channel.data) if isinstance(b, blocks.EnhancedPacket)]) == 1

def test_capture_configuration_errors_propagate(manager, opener, noop_producer):
    iface = manager.register_interface("Needs Config", noop_producer)
    iface.add_config_field(ConfigField("Token", FieldType.PASSWORD))
    with pytest.raises(MissingFieldFlagError):
        manager.dispatch(["--extcap-interface", "ExtcapNet_NeedsConfig", "--capture", "--fifo", "f"])
    assert opener.channel.closed

def test_register_interface_instance(manager, noop_producer):
    iface = BasicCaptureInterface("Custom", noop_producer, LinkLayerType.LINUX_SLL)
    assert manager.register_interface(iface) is iface
    assert manager.interfaces == [iface]

def test_register_duplicate_identifier_fails(manager, noop_producer):
    manager.register_interface("Foo Bar", noop_producer)
    with pytest.raises(ExtcapError):
        manager.register_interface("FooBar", noop_producer)

def test_run_prints_and_exits(two_interfaces, capsys):
    with pytest.raises(SystemExit) as exc:
        two_interfaces.run(["--extcap-interfaces"])
    assert exc.value.code == EXIT_OK
    out = capsys.readouterr().out
    assert "interface {value=ExtcapNet_FooBar}{display=Foo Bar}" in out
    assert "interface {value=ExtcapNet_Baz}{display=Baz}" in out

def test_run_exits_with_unknown_interface_code(two_interfaces, capsys):
    with pytest.raises(SystemExit) as exc:
        two_interfaces.run(["--extcap-interface", "ExtcapNet_Nonexistent"])
    assert exc.value.code == EXIT_UNKNOWN_INTERFACE
    assert "ExtcapNet_Nonexistent" in capsys.readouterr().out
