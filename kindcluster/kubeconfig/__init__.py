"""Reading, encoding, merging, writing and removing cluster entries in kubeconfig files."""