"""Reserved for web page support; holds no modules."""