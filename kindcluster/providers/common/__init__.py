"""Node naming, host ports, proxy settings, images, log waiting and log collection."""