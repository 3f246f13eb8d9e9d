import yaml

from integration_operator import cli


def _write_config(tmp_path) -> str:
    config_path = tmp_path / "operator.yaml"
    config_path.write_text(
        "\n".join(
            [
                f"workspace: '{(tmp_path / 'work').as_posix()}'",
                f"log_dir: '{(tmp_path / 'logs').as_posix()}'",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return str(config_path)


def test_cli_list_traits_smoke(capsys):
    rc = cli.main(["list-traits"])
    assert rc == 0

    out = capsys.readouterr().out
    assert "classpath" in out
    assert "knative-service" in out
    assert "options: autoscaling-class" in out


def test_cli_list_traits_filters_by_profile(capsys):
    rc = cli.main(["list-traits", "--profile", "knative"])
    assert rc == 0

    out = capsys.readouterr().out
    assert "knative-service" in out
    assert "route " not in out


def test_cli_deploy_renders_manifests(tmp_path):
    integration_path = tmp_path / "integration.yaml"
    integration_path.write_text(
        "\n".join(
            [
                "metadata:",
                "  name: hello",
                "  namespace: demo",
                "spec:",
                "  sources:",
                "    - name: hello.groovy",
                "      content: \"from('undertow:http://0.0.0.0:8080/hi').to('log:info')\"",
                "  traits:",
                "    container:",
                "      port: 8081",
                "",
            ]
        ),
        encoding="utf-8",
    )
    kit_path = tmp_path / "kit.yaml"
    kit_path.write_text(
        "metadata:\n  name: kit-hello\n  namespace: demo\nstatus:\n  phase: ready\n  image: img:1\n",
        encoding="utf-8",
    )
    out_path = tmp_path / "out.yaml"

    rc = cli.main(
        [
            "--config",
            _write_config(tmp_path),
            "deploy",
            str(integration_path),
            "--kit",
            str(kit_path),
            "--output",
            str(out_path),
        ]
    )

    assert rc == 0
    docs = list(yaml.safe_load_all(out_path.read_text(encoding="utf-8")))
    kinds = [(doc["kind"], doc["metadata"]["name"]) for doc in docs]
    assert ("Deployment", "hello") in kinds
    assert ("Service", "hello") in kinds
    deployment = next(doc for doc in docs if doc["kind"] == "Deployment")
    container = deployment["spec"]["template"]["spec"]["containers"][0]
    assert container["image"] == "img:1"
    assert container["ports"] == [{"name": "http", "containerPort": 8081, "protocol": "TCP"}]
    assert any(e["name"] == "JAVA_CLASSPATH" for e in container["env"])
    assert list((tmp_path / "logs").glob("deploy-*_oplog.log"))


def test_cli_deploy_reports_trait_failures(tmp_path):
    integration_path = tmp_path / "integration.yaml"
    integration_path.write_text(
        "metadata:\n  name: hello\nspec:\n  traits:\n    container:\n      port: not-a-port\n",
        encoding="utf-8",
    )

    rc = cli.main(["--config", _write_config(tmp_path), "deploy", str(integration_path)])

    assert rc == 1
