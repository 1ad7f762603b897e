"""Sub-package for per-cluster API discovery; it currently holds no modules."""