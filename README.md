# kindcluster

A library of building blocks for local Kubernetes clusters whose nodes are
Docker containers. It covers:

- **kubeconfig files** (`kindcluster.kubeconfig`): turning the admin
  kubeconfig written by kubeadm into a cluster-specific entry, merging it into
  the user's kubeconfig the way kubectl picks its files (an explicit path,
  then `$KUBECONFIG`, then `$HOME/.kube/config`), and removing it again. A
  `<file>.lock` file guards every write.
- **load balancer configuration** (`kindcluster.loadbalancer.haproxy`):
  rendering the HAProxy configuration that fronts several control-plane nodes.
- **provider helpers** (`kindcluster.providers.common`): node naming, free
  host port selection, proxy environment variables, the set of node images a
  configuration needs, waiting for a log line, and collecting node logs.
- **Docker pieces** (`kindcluster.providers.docker`, `kindcluster.logs`):
  running commands inside node containers, managing the shared Docker
  network, pulling images with retries, inspecting the Docker host, and
  copying directories out of nodes.

The Docker parts call the `docker` command-line client, which must be on
`PATH`. Everything else needs only Python and PyYAML.

## Kubeconfig files

```python
from kindcluster.kubeconfig.read import kind_from_raw_kubeadm
from kindcluster.kubeconfig.merge import write_merged
from kindcluster.kubeconfig.remove import remove_kind

with open("admin.conf") as handle:
    raw = handle.read()

# Rename every entry to "kind-dev" and point the cluster at another server.
cfg = kind_from_raw_kubeadm(raw, "dev", "https://127.0.0.1:6443")

# Merge into the file kubectl would merge into and make it the current context.
# An empty path means: follow $KUBECONFIG, then $HOME/.kube/config.
write_merged(cfg, "")

# Later, drop the cluster, user and context entries again from every
# kubeconfig kubectl would consider.
remove_kind("dev", "")
```

- Entries are named by `kind_cluster_key("dev")`, which gives `"kind-dev"`.
- A kubeadm kubeconfig that does not hold exactly one cluster, one user and
  one context is rejected with `KubeconfigError`
  (`kindcluster.kubeconfig.helpers`), as are malformed documents.
- `Config` (`kindcluster.kubeconfig.types`) keeps every field it does not
  look at in `other_fields`, so those are written back unchanged.
- `encode(cfg)` writes YAML with sorted keys; an empty `Config` encodes to
  the empty string. `read(path)` returns an empty `Config` for a missing
  file, and `write(cfg, path)` creates parent directories and writes the file
  with mode `0600`.
- `merge(existing, kind)` replaces entries of the same name, appends new
  ones and switches the current context; `remove(cfg, name)` returns whether
  anything was removed.
- `locked(path)` in `kindcluster.kubeconfig.write` is a context manager that
  holds the lock file for the duration of a block; it raises
  `FileExistsError` if the lock is already held.

## Load balancer configuration

```python
from kindcluster.loadbalancer.haproxy import ConfigData, render_config

text = render_config(ConfigData(
    control_plane_port=6443,
    backend_servers={"dev-control-plane": "dev-control-plane:6443"},
))
```

Backend servers are listed in order of their names; `ipv6=True` adds an IPv6
bind and makes the resolver prefer IPv6. `IMAGE` and `CONFIG_PATH` name the
HAProxy image and where its configuration lives inside it.

## Provider helpers

```python
from kindcluster.providers.common.namer import make_node_namer

name = make_node_namer("dev")
name("control-plane")  # "dev-control-plane"
name("worker")         # "dev-worker"
name("worker")         # "dev-worker2"
```

- `port_or_get_free_port(port, listen_addr)` returns `(port, None)` for an
  explicit port, `(0, None)` for `-1`, and for `0` a free port on
  `listen_addr` together with a release function. The port stays held until
  the release function is called, so call it once every port has been chosen.
  `APISERVER_INTERNAL_PORT` is `6443`.
- `get_proxy_envs(cfg, get_env)` returns `HTTP_PROXY`, `HTTPS_PROXY` and
  `NO_PROXY` in upper and lower case; when any proxy is set the service and
  pod subnets (`cfg.networking.service_subnet`, `cfg.networking.pod_subnet`)
  are appended to `NO_PROXY`. `get_env` defaults to the process environment.
- `required_node_images(cfg)` returns the set of `image` values of
  `cfg.nodes`.
- `wait_until_log_regexp_matches(argv, pattern, timeout)` runs a command
  until one of its output lines matches, raising `RuntimeError` otherwise;
  `node_reached_cgroups_ready_regexp()` is the pattern for a node being ready.
- `collect_logs(node, directory)` (`kindcluster.providers.common.collect`)
  writes a node's version file, journals and image list under `directory`,
  running all collections and raising their failures afterwards.

## Docker pieces

```python
import io

from kindcluster.providers.docker.node import Node

node = Node("dev-control-plane")
buffer = io.BytesIO()
node.command("cat", "/etc/kubernetes/admin.conf").run(stdout=buffer)
node.role()  # value of the node's role label
node.ip()    # (ipv4, ipv6)
```

- `run`, `output` and `output_lines` in `kindcluster.providers.docker.node`
  run host commands and raise `CommandError`, which carries the command's
  output, on a non-zero exit.
- `dump_dir(node, node_dir, host_dir)` (`kindcluster.logs.dump`) copies a
  directory from a node to the host through `tar`; `untar(stream, directory)`
  unpacks regular files and directories and skips other entries with a
  warning.
- `ensure_network(name)` (`kindcluster.providers.docker.network`) creates a
  bridge network with an IPv6 subnet derived from its name, probes other
  subnets when one overlaps, falls back to IPv4 when the host has no IPv6, and
  removes duplicates, keeping the network with the most attached containers:

  ```python
  from kindcluster.providers.docker.network import generate_ula_subnet_from_name

  generate_ula_subnet_from_name("kind", 0)  # "fc00:f853:ccd:e793::/64"
  ```

- `sanitize_image(image)` (`kindcluster.providers.docker.pull`) strips a
  digest for display:
  `sanitize_image("kindest/node:v1.27.3@sha256:abc")` gives
  `("kindest/node:v1.27.3", "kindest/node:v1.27.3@sha256:abc")`.
  `pull_if_not_present(image, retries)` only pulls when `docker inspect`
  cannot find the image, retrying a failed pull with a growing pause, and
  `ensure_node_images(cfg)` does this for every node image.
- `kindcluster.providers.docker.host` reports on the Docker host:
  `is_available()`, `userns_remap()`, `mount_dev_mapper()`, `mount_fuse()`,
  and `docker_info()` / `parse_docker_info(raw)`, which return a `HostInfo`.

## What this package does not do

It is a library only: there is no command-line tool. It does not create,
list or delete clusters or node containers, and it has no cluster
configuration format of its own; functions such as `get_proxy_envs` and
`ensure_node_images` take any object with the attributes they name. To get a
running cluster's kubeconfig, read the admin kubeconfig from a node yourself
and pass its text to `kind_from_raw_kubeadm`.

## Running the tests

```
pip install -e ".[test]"
pytest
```