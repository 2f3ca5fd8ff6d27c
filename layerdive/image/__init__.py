"""Reserved for the image model and archive reading; it holds no modules yet."""