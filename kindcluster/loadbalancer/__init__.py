"""HAProxy configuration for the load balancer in front of control-plane nodes."""