"""Reserved for CI rule evaluation; it holds no modules yet."""